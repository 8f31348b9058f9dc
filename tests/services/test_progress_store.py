from datetime import date, datetime

import pytest
from pydantic import ValidationError

from app.crud.store import CourseProgressExistsError, MemoryProgressStore
from app.schemas.course_progress import CourseProgressCreate


def _create(store, user_id="u1", course_id="c1"):
    now = datetime(2026, 3, 2, 8, 0)
    return store.create_course_progress(CourseProgressCreate(
        user_id=user_id,
        course_id=course_id,
        enrolled_at=now,
        last_accessed_at=now,
        last_activity_date=now.date(),
    ))


def test_read_missing_records(store):
    assert store.read_course_progress("u1", "c1") is None
    assert store.read_lesson_progress(999, "l1") is None
    assert store.list_lesson_progress(999) == []
    assert store.list_course_progress_for_user("u1") == []


def test_bulk_insert_keeps_order(store):
    created = _create(store)

    store.bulk_insert_lesson_progress(created.id, ["z", "a", "m"])

    assert [l.lesson_id for l in store.list_lesson_progress(created.id)] == ["z", "a", "m"]
    assert [l.lesson_id for l in store.read_course_progress("u1", "c1").lessons] == ["z", "a", "m"]


def test_increments_are_additive(store):
    created = _create(store)
    store.bulk_insert_lesson_progress(created.id, ["l1"])

    store.increment_lesson_progress(created.id, "l1", {"time_spent": 5, "video_watch_time": 5})
    store.increment_lesson_progress(created.id, "l1", {"time_spent": 7, "video_watch_time": 0})
    store.increment_course_progress(created.id, {"total_time_spent": 12})
    store.increment_course_progress(created.id, {"total_time_spent": 3})

    lesson = store.read_lesson_progress(created.id, "l1")
    assert lesson.time_spent == 12
    assert lesson.video_watch_time == 5
    assert store.read_course_progress("u1", "c1").total_time_spent == 15


def test_writes_update_only_given_fields(store):
    created = _create(store)
    store.bulk_insert_lesson_progress(created.id, ["l1"])

    store.write_course_progress("u1", "c1", {"current_streak": 4, "achievements": ["first_lesson"]})
    store.write_lesson_progress(created.id, "l1", {"last_watch_position": 42})

    progress = store.read_course_progress("u1", "c1")
    assert progress.current_streak == 4
    assert progress.achievements == ["first_lesson"]
    assert progress.last_activity_date == date(2026, 3, 2)
    assert progress.lessons[0].last_watch_position == 42
    assert progress.lessons[0].completed is False


def test_writes_to_missing_records_do_nothing(store):
    store.write_course_progress("nobody", "c1", {"current_streak": 3})
    store.write_lesson_progress(999, "l1", {"completed": True})

    assert store.read_course_progress("nobody", "c1") is None


def test_writes_reject_out_of_range_values(store):
    _create(store)

    with pytest.raises(ValidationError):
        store.write_course_progress("u1", "c1", {"completion_percentage": 101})
    with pytest.raises(ValidationError):
        store.write_course_progress("u1", "c1", {"current_streak": 0})


def test_returned_records_are_copies():
    store = MemoryProgressStore()
    created = _create(store)
    store.bulk_insert_lesson_progress(created.id, ["l1"])

    snapshot = store.read_course_progress("u1", "c1")
    snapshot.achievements.append("five_hours")
    snapshot.lessons[0].completed = True

    fresh = store.read_course_progress("u1", "c1")
    assert fresh.achievements == []
    assert fresh.lessons[0].completed is False


def test_duplicate_pair_raises_exists_error_and_store_stays_usable(store):
    created = _create(store)
    store.bulk_insert_lesson_progress(created.id, ["l1"])

    with pytest.raises(CourseProgressExistsError):
        _create(store)

    store.write_course_progress("u1", "c1", {"current_streak": 2})
    progress = store.read_course_progress("u1", "c1")
    assert progress.id == created.id
    assert progress.current_streak == 2
    assert [l.lesson_id for l in progress.lessons] == ["l1"]
    assert len(store.list_course_progress_for_user("u1")) == 1
