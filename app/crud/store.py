"""Record stores the progress tracker reads from and writes to.

``ProgressStore`` is the boundary the tracker depends on. ``SQLProgressStore``
persists through a SQLAlchemy session and leaves committing to the session
owner; ``MemoryProgressStore`` keeps records in process and is used by tests
and local tooling.
"""
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import exc
from sqlalchemy.orm import Session

from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.schemas.course_progress import CourseProgressCreate, CourseProgressRecord, CourseProgressUpdate
from app.schemas.lesson_progress import LessonProgressRecord, LessonProgressUpdate


class CourseProgressExistsError(Exception):
    """Raised by ``create_course_progress`` when the (user, course) pair is taken."""

    def __init__(self, user_id: str, course_id: str):
        super().__init__(f"Course progress already exists for user {user_id} in course {course_id}")
        self.user_id = user_id
        self.course_id = course_id


class ProgressStore(ABC):
    @abstractmethod
    def read_course_progress(self, user_id: str, course_id: str) -> Optional[CourseProgressRecord]:
        pass

    @abstractmethod
    def list_course_progress_for_user(self, user_id: str) -> List[CourseProgressRecord]:
        pass

    @abstractmethod
    def create_course_progress(self, obj_in: CourseProgressCreate) -> CourseProgressRecord:
        pass

    @abstractmethod
    def write_course_progress(self, user_id: str, course_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def increment_course_progress(self, course_progress_id: int, deltas: Dict[str, int]) -> None:
        pass

    @abstractmethod
    def read_lesson_progress(self, course_progress_id: int, lesson_id: str) -> Optional[LessonProgressRecord]:
        pass

    @abstractmethod
    def write_lesson_progress(self, course_progress_id: int, lesson_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def increment_lesson_progress(self, course_progress_id: int, lesson_id: str, deltas: Dict[str, int]) -> None:
        pass

    @abstractmethod
    def list_lesson_progress(self, course_progress_id: int) -> List[LessonProgressRecord]:
        pass

    @abstractmethod
    def bulk_insert_lesson_progress(self, course_progress_id: int, lesson_ids: List[str]) -> None:
        pass


class SQLProgressStore(ProgressStore):
    def __init__(self, db: Session):
        self.db = db

    def read_course_progress(self, user_id: str, course_id: str) -> Optional[CourseProgressRecord]:
        db_obj = crud_course_progress.get_by_user_and_course(self.db, user_id=user_id, course_id=course_id)
        if db_obj is None:
            return None
        return CourseProgressRecord.model_validate(db_obj)

    def list_course_progress_for_user(self, user_id: str) -> List[CourseProgressRecord]:
        return [
            CourseProgressRecord.model_validate(cp)
            for cp in crud_course_progress.get_by_user(self.db, user_id=user_id)
        ]

    def create_course_progress(self, obj_in: CourseProgressCreate) -> CourseProgressRecord:
        # The savepoint keeps the surrounding request transaction usable after a duplicate insert
        try:
            with self.db.begin_nested():
                db_obj = crud_course_progress.create(self.db, obj_in=obj_in)
        except exc.IntegrityError as e:
            raise CourseProgressExistsError(obj_in.user_id, obj_in.course_id) from e
        return CourseProgressRecord.model_validate(db_obj)

    def write_course_progress(self, user_id: str, course_id: str, fields: Dict[str, Any]) -> None:
        db_obj = crud_course_progress.get_by_user_and_course(self.db, user_id=user_id, course_id=course_id)
        if db_obj is None:
            return
        crud_course_progress.update(self.db, db_obj=db_obj, obj_in=CourseProgressUpdate(**fields))

    def increment_course_progress(self, course_progress_id: int, deltas: Dict[str, int]) -> None:
        crud_course_progress.increment_counters(self.db, course_progress_id, deltas)

    def read_lesson_progress(self, course_progress_id: int, lesson_id: str) -> Optional[LessonProgressRecord]:
        db_obj = crud_lesson_progress.get_by_course_progress_and_lesson(
            self.db, course_progress_id=course_progress_id, lesson_id=lesson_id
        )
        if db_obj is None:
            return None
        return LessonProgressRecord.model_validate(db_obj)

    def write_lesson_progress(self, course_progress_id: int, lesson_id: str, fields: Dict[str, Any]) -> None:
        db_obj = crud_lesson_progress.get_by_course_progress_and_lesson(
            self.db, course_progress_id=course_progress_id, lesson_id=lesson_id
        )
        if db_obj is None:
            return
        crud_lesson_progress.update(self.db, db_obj=db_obj, obj_in=LessonProgressUpdate(**fields))

    def increment_lesson_progress(self, course_progress_id: int, lesson_id: str, deltas: Dict[str, int]) -> None:
        crud_lesson_progress.increment_counters(self.db, course_progress_id, lesson_id, deltas)

    def list_lesson_progress(self, course_progress_id: int) -> List[LessonProgressRecord]:
        return [
            LessonProgressRecord.model_validate(lp)
            for lp in crud_lesson_progress.get_all_by_course_progress(self.db, course_progress_id=course_progress_id)
        ]

    def bulk_insert_lesson_progress(self, course_progress_id: int, lesson_ids: List[str]) -> None:
        crud_lesson_progress.bulk_create(self.db, course_progress_id=course_progress_id, lesson_ids=lesson_ids)


class MemoryProgressStore(ProgressStore):
    def __init__(self):
        self._courses: Dict[int, CourseProgressRecord] = {}
        self._keys: Dict[Tuple[str, str], int] = {}
        self._lessons: Dict[int, List[LessonProgressRecord]] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def _snapshot(self, course_progress_id: int) -> CourseProgressRecord:
        record = self._courses[course_progress_id].model_copy(deep=True)
        record.lessons = self.list_lesson_progress(course_progress_id)
        return record

    def _find_lesson(self, course_progress_id: int, lesson_id: str) -> Optional[LessonProgressRecord]:
        for lesson in self._lessons.get(course_progress_id, []):
            if lesson.lesson_id == lesson_id:
                return lesson
        return None

    def read_course_progress(self, user_id: str, course_id: str) -> Optional[CourseProgressRecord]:
        with self._lock:
            course_progress_id = self._keys.get((user_id, course_id))
            if course_progress_id is None:
                return None
            return self._snapshot(course_progress_id)

    def list_course_progress_for_user(self, user_id: str) -> List[CourseProgressRecord]:
        with self._lock:
            return [
                self._snapshot(course_progress_id)
                for (owner, _), course_progress_id in self._keys.items()
                if owner == user_id
            ]

    def create_course_progress(self, obj_in: CourseProgressCreate) -> CourseProgressRecord:
        with self._lock:
            key = (obj_in.user_id, obj_in.course_id)
            if key in self._keys:
                raise CourseProgressExistsError(obj_in.user_id, obj_in.course_id)
            record = CourseProgressRecord(id=self._next_id, **obj_in.model_dump())
            self._next_id += 1
            self._courses[record.id] = record
            self._keys[key] = record.id
            self._lessons[record.id] = []
            return self._snapshot(record.id)

    def write_course_progress(self, user_id: str, course_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            course_progress_id = self._keys.get((user_id, course_id))
            if course_progress_id is None:
                return
            update_data = CourseProgressUpdate(**fields).model_dump(exclude_unset=True)
            current = self._courses[course_progress_id]
            self._courses[course_progress_id] = current.model_copy(update=update_data)

    def increment_course_progress(self, course_progress_id: int, deltas: Dict[str, int]) -> None:
        with self._lock:
            current = self._courses.get(course_progress_id)
            if current is None:
                return
            update_data = {name: getattr(current, name) + delta for name, delta in deltas.items()}
            self._courses[course_progress_id] = current.model_copy(update=update_data)

    def read_lesson_progress(self, course_progress_id: int, lesson_id: str) -> Optional[LessonProgressRecord]:
        with self._lock:
            lesson = self._find_lesson(course_progress_id, lesson_id)
            return lesson.model_copy() if lesson else None

    def write_lesson_progress(self, course_progress_id: int, lesson_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            lesson = self._find_lesson(course_progress_id, lesson_id)
            if lesson is None:
                return
            for name, value in LessonProgressUpdate(**fields).model_dump(exclude_unset=True).items():
                setattr(lesson, name, value)

    def increment_lesson_progress(self, course_progress_id: int, lesson_id: str, deltas: Dict[str, int]) -> None:
        with self._lock:
            lesson = self._find_lesson(course_progress_id, lesson_id)
            if lesson is None:
                return
            for name, delta in deltas.items():
                setattr(lesson, name, getattr(lesson, name) + delta)

    def list_lesson_progress(self, course_progress_id: int) -> List[LessonProgressRecord]:
        with self._lock:
            return [lesson.model_copy() for lesson in self._lessons.get(course_progress_id, [])]

    def bulk_insert_lesson_progress(self, course_progress_id: int, lesson_ids: List[str]) -> None:
        with self._lock:
            rows = self._lessons.setdefault(course_progress_id, [])
            for lesson_id in lesson_ids:
                rows.append(LessonProgressRecord(
                    id=self._next_id,
                    course_progress_id=course_progress_id,
                    lesson_id=lesson_id,
                    position=len(rows),
                ))
                self._next_id += 1
