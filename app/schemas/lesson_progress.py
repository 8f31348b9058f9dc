from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class LessonProgressBase(BaseModel):
    course_progress_id: int
    lesson_id: str


class LessonProgressCreate(LessonProgressBase):
    position: int = 0


class LessonProgressUpdate(BaseModel):
    completed: Optional[bool] = None
    completed_at: Optional[datetime] = None
    last_watch_position: Optional[int] = None


class LessonProgressRecord(BaseModel):
    """One lesson's progress inside a course enrollment."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    course_progress_id: Optional[int] = None
    lesson_id: str
    position: int = 0
    completed: bool = False
    completed_at: Optional[datetime] = None
    time_spent: int = 0
    video_watch_time: int = 0
    last_watch_position: int = 0


class WatchTimeUpdate(BaseModel):
    watched_seconds: int = Field(..., gt=0, description="Whole seconds of playback since the last report")
    current_position: int = Field(..., ge=0, description="Playback offset in seconds")


class LessonCompletionUpdate(BaseModel):
    completed: bool
    additional_time: int = Field(0, ge=0, description="Seconds to attribute to the lesson")
