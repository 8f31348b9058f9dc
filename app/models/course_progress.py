from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class CourseProgress(Base):
    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_progress_user_course"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    course_id = Column(String, nullable=False, index=True)
    enrolled_at = Column(DateTime, nullable=False)
    last_accessed_at = Column(DateTime, nullable=False)
    total_time_spent = Column(Integer, nullable=False, default=0)
    completion_percentage = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=1)
    last_activity_date = Column(Date, nullable=True)
    achievements = Column(JSON, nullable=False, default=list)

    lessons = relationship(
        "LessonProgress",
        back_populates="course_progress",
        order_by="LessonProgress.position",
        cascade="all, delete-orphan",
    )
