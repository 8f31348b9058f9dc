from enum import Enum


class AchievementEnum(str, Enum):
    FIRST_LESSON = "first_lesson"
    FIVE_LESSONS = "five_lessons"
    COURSE_COMPLETE = "course_complete"
    WEEK_STREAK = "week_streak"
    FIVE_HOURS = "five_hours"


FIVE_LESSONS_THRESHOLD = 5
WEEK_STREAK_THRESHOLD = 7
FIVE_HOURS_SECONDS = 5 * 60 * 60

ACHIEVEMENT_DETAILS = {
    AchievementEnum.FIRST_LESSON.value: {
        "title": "First Steps",
        "description": "Completed your first lesson",
        "icon": "🎯",
    },
    AchievementEnum.FIVE_LESSONS.value: {
        "title": "Knowledge Seeker",
        "description": "Completed 5 lessons",
        "icon": "📚",
    },
    AchievementEnum.COURSE_COMPLETE.value: {
        "title": "Course Master",
        "description": "Completed an entire course",
        "icon": "🏆",
    },
    AchievementEnum.WEEK_STREAK.value: {
        "title": "Consistent Learner",
        "description": "Maintained a 7-day learning streak",
        "icon": "🔥",
    },
    AchievementEnum.FIVE_HOURS.value: {
        "title": "Time Invested",
        "description": "Spent 5 hours learning",
        "icon": "⏰",
    },
}

DEFAULT_ACHIEVEMENT_DETAILS = {"title": "Achievement", "description": "", "icon": "⭐"}
