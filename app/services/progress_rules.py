"""Pure progress arithmetic: completion, streaks, achievements, formatting."""
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from app.core.constants import (
    ACHIEVEMENT_DETAILS,
    DEFAULT_ACHIEVEMENT_DETAILS,
    FIVE_HOURS_SECONDS,
    FIVE_LESSONS_THRESHOLD,
    WEEK_STREAK_THRESHOLD,
    AchievementEnum,
)
from app.schemas.course_progress import AchievementDetail
from app.schemas.lesson_progress import LessonProgressRecord


def count_completed(lessons: Iterable[LessonProgressRecord]) -> int:
    return sum(1 for lesson in lessons if lesson.completed)


def calculate_completion_percentage(lessons: Sequence[LessonProgressRecord]) -> int:
    """Whole-number percentage of completed lessons, halves rounded up.

    An empty lesson list is 0%.
    """
    total = len(lessons)
    if total == 0:
        return 0
    completed = count_completed(lessons)
    return (200 * completed + total) // (2 * total)


def calculate_new_streak(
    last_activity_date: Optional[Union[date, datetime]],
    current_streak: int,
    today: date,
) -> int:
    """Consecutive-day counter after activity on ``today``.

    Same day keeps the streak, the next calendar day extends it by one and
    any other gap starts over at 1.
    """
    if last_activity_date is None:
        return 1
    if isinstance(last_activity_date, datetime):
        last_activity_date = last_activity_date.date()

    diff_in_days = (today - last_activity_date).days
    if diff_in_days == 0:
        return max(current_streak, 1)
    if diff_in_days == 1:
        return max(current_streak, 1) + 1
    return 1


def check_achievements(
    lessons: Sequence[LessonProgressRecord],
    completion_percentage: int,
    current_streak: int,
    total_time_spent: int,
    achievements: Sequence[str],
) -> List[str]:
    """Stored achievements plus any newly qualified ones, in unlock order."""
    unlocked = list(dict.fromkeys(achievements))
    completed_count = count_completed(lessons)

    earned = [
        (AchievementEnum.FIRST_LESSON, completed_count >= 1),
        (AchievementEnum.FIVE_LESSONS, completed_count >= FIVE_LESSONS_THRESHOLD),
        (AchievementEnum.COURSE_COMPLETE, completion_percentage == 100),
        (AchievementEnum.WEEK_STREAK, current_streak >= WEEK_STREAK_THRESHOLD),
        (AchievementEnum.FIVE_HOURS, total_time_spent >= FIVE_HOURS_SECONDS),
    ]
    for achievement, qualified in earned:
        if qualified and achievement.value not in unlocked:
            unlocked.append(achievement.value)
    return unlocked


def format_time_spent(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def get_achievement_details(achievement_id: str) -> AchievementDetail:
    details = ACHIEVEMENT_DETAILS.get(achievement_id, DEFAULT_ACHIEVEMENT_DETAILS)
    return AchievementDetail(id=achievement_id, **details)
