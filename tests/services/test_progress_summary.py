from datetime import datetime

from app.schemas.course_progress import CourseProgressRecord
from app.schemas.lesson_progress import LessonProgressRecord
from app.services.progress_summary import summarize_user_progress


def _course(course_id, flags, percentage, streak=1, total_time=0, watch_times=None, achievements=()):
    watch_times = watch_times or [0] * len(flags)
    return CourseProgressRecord(
        user_id="u1",
        course_id=course_id,
        enrolled_at=datetime(2026, 1, 1),
        last_accessed_at=datetime(2026, 1, 2),
        total_time_spent=total_time,
        completion_percentage=percentage,
        current_streak=streak,
        achievements=list(achievements),
        lessons=[
            LessonProgressRecord(lesson_id=f"{course_id}-{i}", completed=flag, video_watch_time=w)
            for i, (flag, w) in enumerate(zip(flags, watch_times))
        ],
    )


def test_summary_of_no_courses():
    summary = summarize_user_progress([])

    assert summary.total_courses == 0
    assert summary.average_completion == 0
    assert summary.best_streak == 0
    assert summary.total_time_spent_display == "0m"
    assert summary.achievements == []


def test_summary_totals_and_buckets():
    progress = [
        _course("c1", [True, True], 100, streak=3, total_time=4000, watch_times=[1200, 1800],
                achievements=["first_lesson", "course_complete"]),
        _course("c2", [True, False, False], 33, streak=5, total_time=600, watch_times=[300, 0, 0],
                achievements=["first_lesson"]),
        _course("c3", [False], 0, total_time=0),
    ]

    summary = summarize_user_progress(progress)

    assert summary.total_courses == 3
    assert summary.total_time_spent == 4600
    assert summary.total_time_spent_display == "1h 16m"
    assert summary.total_video_watch_time == 3300
    assert summary.lessons_completed == 3
    assert summary.total_lessons == 6
    assert summary.average_completion == 44
    assert summary.best_streak == 5
    assert summary.completed_courses == 1
    assert summary.in_progress_courses == 1
    assert summary.not_started_courses == 1
    assert [a.id for a in summary.achievements] == ["first_lesson", "course_complete"]
    assert summary.achievements[0].title == "First Steps"
