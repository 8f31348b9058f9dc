from typing import List, Sequence

from app.schemas.course_progress import CourseProgressRecord, ProgressSummary
from app.services.progress_rules import count_completed, format_time_spent, get_achievement_details


def summarize_user_progress(progress: Sequence[CourseProgressRecord]) -> ProgressSummary:
    """Dashboard totals across every course a user is enrolled in."""
    total_time_spent = sum(p.total_time_spent for p in progress)
    percentages = [p.completion_percentage for p in progress]

    achievement_ids: List[str] = []
    for p in progress:
        for achievement_id in p.achievements:
            if achievement_id not in achievement_ids:
                achievement_ids.append(achievement_id)

    return ProgressSummary(
        total_courses=len(progress),
        total_time_spent=total_time_spent,
        total_video_watch_time=sum(l.video_watch_time for p in progress for l in p.lessons),
        total_time_spent_display=format_time_spent(total_time_spent),
        lessons_completed=sum(count_completed(p.lessons) for p in progress),
        total_lessons=sum(len(p.lessons) for p in progress),
        average_completion=(2 * sum(percentages) + len(percentages)) // (2 * len(percentages)) if percentages else 0,
        best_streak=max((p.current_streak for p in progress), default=0),
        in_progress_courses=sum(1 for pct in percentages if 0 < pct < 100),
        completed_courses=sum(1 for pct in percentages if pct == 100),
        not_started_courses=sum(1 for pct in percentages if pct == 0),
        achievements=[get_achievement_details(a) for a in achievement_ids],
    )
