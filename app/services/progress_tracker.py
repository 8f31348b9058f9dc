import logging
from datetime import datetime
from typing import Callable, List, Optional

from app.crud.store import CourseProgressExistsError, ProgressStore
from app.schemas.course_progress import CourseProgressCreate, CourseProgressRecord
from app.services.progress_rules import (
    calculate_completion_percentage,
    calculate_new_streak,
    check_achievements,
)

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Per-(user, course) learning progress on top of a ``ProgressStore``.

    Operations that reference a course or lesson without a progress row
    return without effect. Store errors propagate to the caller.
    """

    def __init__(self, store: ProgressStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def initialize(self, user_id: str, course_id: str, lesson_ids: List[str]) -> CourseProgressRecord:
        existing = self.store.read_course_progress(user_id, course_id)
        if existing:
            logger.debug(f"Progress for user {user_id} in course {course_id} already initialized")
            return existing

        now = self.clock()
        try:
            created = self.store.create_course_progress(CourseProgressCreate(
                user_id=user_id,
                course_id=course_id,
                enrolled_at=now,
                last_accessed_at=now,
                total_time_spent=0,
                completion_percentage=0,
                current_streak=1,
                last_activity_date=now.date(),
                achievements=[],
            ))
        except CourseProgressExistsError:
            # Another session enrolled between the read and the insert
            logger.info(f"Progress for user {user_id} in course {course_id} was initialized concurrently")
            return self.store.read_course_progress(user_id, course_id)

        unique_lesson_ids = list(dict.fromkeys(lesson_ids))
        if unique_lesson_ids:
            self.store.bulk_insert_lesson_progress(created.id, unique_lesson_ids)

        logger.info(
            f"Initialized progress for user {user_id} in course {course_id} "
            f"with {len(unique_lesson_ids)} lessons"
        )
        return self.store.read_course_progress(user_id, course_id)

    def record_watch_time(
        self,
        user_id: str,
        course_id: str,
        lesson_id: str,
        watched_seconds: int,
        current_position: int,
    ) -> None:
        course_progress = self.store.read_course_progress(user_id, course_id)
        if not course_progress:
            logger.debug(f"No progress for user {user_id} in course {course_id}; watch time ignored")
            return

        lesson = self.store.read_lesson_progress(course_progress.id, lesson_id)
        if not lesson:
            logger.debug(f"No progress for lesson {lesson_id} in course {course_id}; watch time ignored")
            return

        self.store.increment_lesson_progress(
            course_progress.id,
            lesson_id,
            {"video_watch_time": watched_seconds, "time_spent": watched_seconds},
        )
        self.store.write_lesson_progress(
            course_progress.id, lesson_id, {"last_watch_position": current_position}
        )

        now = self.clock()
        new_streak = calculate_new_streak(
            course_progress.last_activity_date, course_progress.current_streak, now.date()
        )
        self.store.increment_course_progress(course_progress.id, {"total_time_spent": watched_seconds})
        # Achievements are only evaluated when a lesson's completion changes
        self.store.write_course_progress(user_id, course_id, {
            "last_accessed_at": now,
            "last_activity_date": now.date(),
            "current_streak": new_streak,
        })

    def set_lesson_completion(
        self,
        user_id: str,
        course_id: str,
        lesson_id: str,
        completed: bool,
        additional_time: int = 0,
    ) -> None:
        course_progress = self.store.read_course_progress(user_id, course_id)
        if not course_progress:
            logger.debug(f"No progress for user {user_id} in course {course_id}; completion ignored")
            return

        lesson = self.store.read_lesson_progress(course_progress.id, lesson_id)
        if not lesson:
            logger.debug(f"No progress for lesson {lesson_id} in course {course_id}; completion ignored")
            return

        now = self.clock()
        lesson_fields = {"completed": completed}
        # completed_at is kept when a lesson is un-completed
        if completed and not lesson.completed:
            lesson_fields["completed_at"] = now
        self.store.write_lesson_progress(course_progress.id, lesson_id, lesson_fields)

        if additional_time:
            self.store.increment_lesson_progress(course_progress.id, lesson_id, {"time_spent": additional_time})
            self.store.increment_course_progress(course_progress.id, {"total_time_spent": additional_time})

        lessons = self.store.list_lesson_progress(course_progress.id)
        completion_percentage = calculate_completion_percentage(lessons)
        new_streak = calculate_new_streak(
            course_progress.last_activity_date, course_progress.current_streak, now.date()
        )
        achievements = check_achievements(
            lessons=lessons,
            completion_percentage=completion_percentage,
            current_streak=new_streak,
            total_time_spent=course_progress.total_time_spent + additional_time,
            achievements=course_progress.achievements,
        )

        newly_unlocked = [a for a in achievements if a not in course_progress.achievements]
        if newly_unlocked:
            logger.info(f"User {user_id} unlocked {newly_unlocked} in course {course_id}")

        self.store.write_course_progress(user_id, course_id, {
            "last_accessed_at": now,
            "last_activity_date": now.date(),
            "completion_percentage": completion_percentage,
            "current_streak": new_streak,
            "achievements": achievements,
        })

    def get_course_progress(self, user_id: str, course_id: str) -> Optional[CourseProgressRecord]:
        return self.store.read_course_progress(user_id, course_id)

    def get_user_progress(self, user_id: str) -> List[CourseProgressRecord]:
        return self.store.list_course_progress_for_user(user_id)
