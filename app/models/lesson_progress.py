from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class LessonProgress(Base):
    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("course_progress_id", "lesson_id", name="uq_lesson_progress_course_lesson"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_progress_id = Column(Integer, ForeignKey("course_progress.id"), nullable=False, index=True)
    lesson_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    time_spent = Column(Integer, nullable=False, default=0)
    video_watch_time = Column(Integer, nullable=False, default=0)
    last_watch_position = Column(Integer, nullable=False, default=0)

    course_progress = relationship("CourseProgress", back_populates="lessons")
