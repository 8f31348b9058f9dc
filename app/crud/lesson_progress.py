from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from app.crud.base import CRUDBase
from app.models.lesson_progress import LessonProgress
from app.schemas.lesson_progress import LessonProgressCreate, LessonProgressUpdate

class CRUDLessonProgress(CRUDBase[LessonProgress, LessonProgressCreate, LessonProgressUpdate]):

    def _query_fresh(self, db: Session):
        return db.query(LessonProgress).populate_existing()

    def get_by_course_progress_and_lesson(self, db: Session, course_progress_id: int, lesson_id: str) -> Optional[LessonProgress]:
        return (
            self._query_fresh(db)
            .filter(LessonProgress.course_progress_id == course_progress_id)
            .filter(LessonProgress.lesson_id == lesson_id)
            .first()
        )

    def get_all_by_course_progress(self, db: Session, course_progress_id: int) -> List[LessonProgress]:
        return (
            self._query_fresh(db)
            .filter(LessonProgress.course_progress_id == course_progress_id)
            .order_by(LessonProgress.position, LessonProgress.id)
            .all()
        )

    def bulk_create(self, db: Session, course_progress_id: int, lesson_ids: List[str]) -> None:
        db.add_all([
            LessonProgress(
                course_progress_id=course_progress_id,
                lesson_id=lesson_id,
                position=position,
                completed=False,
                time_spent=0,
                video_watch_time=0,
                last_watch_position=0,
            )
            for position, lesson_id in enumerate(lesson_ids)
        ])
        db.flush()

    def increment_counters(self, db: Session, course_progress_id: int, lesson_id: str, deltas: Dict[str, int]) -> None:
        self.increment(
            db,
            criteria=[
                LessonProgress.course_progress_id == course_progress_id,
                LessonProgress.lesson_id == lesson_id,
            ],
            deltas=deltas,
        )


lesson_progress = CRUDLessonProgress(LessonProgress)
