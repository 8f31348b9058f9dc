from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date, datetime

from app.schemas.lesson_progress import LessonProgressRecord


class CourseProgressBase(BaseModel):
    user_id: str
    course_id: str


class CourseProgressCreate(CourseProgressBase):
    enrolled_at: datetime
    last_accessed_at: datetime
    total_time_spent: int = 0
    completion_percentage: int = 0
    current_streak: int = 1
    last_activity_date: Optional[date] = None
    achievements: List[str] = []


class CourseProgressUpdate(BaseModel):
    last_accessed_at: Optional[datetime] = None
    last_activity_date: Optional[date] = None
    completion_percentage: Optional[int] = Field(None, ge=0, le=100)
    current_streak: Optional[int] = Field(None, ge=1)
    achievements: Optional[List[str]] = None


class CourseProgressRecord(CourseProgressBase):
    """Aggregate progress of one user in one course, with its lesson rows."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    enrolled_at: datetime
    last_accessed_at: datetime
    total_time_spent: int = 0
    completion_percentage: int = Field(0, ge=0, le=100)
    current_streak: int = Field(1, ge=1)
    last_activity_date: Optional[date] = None
    achievements: List[str] = []
    lessons: List[LessonProgressRecord] = []

    @field_validator("achievements", mode="before")
    @classmethod
    def dedupe_achievements(cls, value):
        if value is None:
            return []
        return list(dict.fromkeys(value))


class CourseProgressInitialize(BaseModel):
    lesson_ids: List[str] = Field(default_factory=list, description="Lessons of the course, in display order")


class AchievementDetail(BaseModel):
    id: str
    title: str
    description: str
    icon: str


class ProgressSummary(BaseModel):
    total_courses: int = 0
    total_time_spent: int = 0
    total_video_watch_time: int = 0
    total_time_spent_display: str = "0m"
    lessons_completed: int = 0
    total_lessons: int = 0
    average_completion: int = 0
    best_streak: int = 0
    in_progress_courses: int = 0
    completed_courses: int = 0
    not_started_courses: int = 0
    achievements: List[AchievementDetail] = []
