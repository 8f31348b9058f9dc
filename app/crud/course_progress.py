from sqlalchemy.orm import Session, selectinload
from typing import Dict, List, Optional

from app.crud.base import CRUDBase
from app.models.course_progress import CourseProgress
from app.schemas.course_progress import CourseProgressCreate, CourseProgressUpdate

class CRUDCourseProgress(CRUDBase[CourseProgress, CourseProgressCreate, CourseProgressUpdate]):

    def _query_with_lessons(self, db: Session):
        # Counters may have been advanced by UPDATE statements in this session
        return db.query(CourseProgress).options(
            selectinload(CourseProgress.lessons)
        ).populate_existing()

    def get_by_user_and_course(self, db: Session, user_id: str, course_id: str) -> Optional[CourseProgress]:
        return (
            self._query_with_lessons(db)
            .filter(CourseProgress.user_id == user_id)
            .filter(CourseProgress.course_id == course_id)
            .first()
        )

    def get_by_user(self, db: Session, user_id: str) -> List[CourseProgress]:
        return (
            self._query_with_lessons(db)
            .filter(CourseProgress.user_id == user_id)
            .order_by(CourseProgress.enrolled_at, CourseProgress.id)
            .all()
        )

    def increment_counters(self, db: Session, course_progress_id: int, deltas: Dict[str, int]) -> None:
        self.increment(db, criteria=[CourseProgress.id == course_progress_id], deltas=deltas)


course_progress = CRUDCourseProgress(CourseProgress)
