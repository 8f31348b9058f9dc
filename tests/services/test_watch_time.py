from unittest.mock import Mock, call

import pytest

from app.crud.store import MemoryProgressStore
from app.services.progress_tracker import ProgressTracker
from app.services.watch_time import WatchTimeTracker


@pytest.fixture
def recorder():
    return Mock(spec=ProgressTracker)


def _play(watcher, start, end, step=0.5):
    position = start
    while position < end:
        position += step
        watcher.tick(True, position)


def test_reports_every_ten_seconds_and_remainder_on_close(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1")

    _play(watcher, 0.0, 25.0)
    assert recorder.record_watch_time.call_args_list == [
        call("u1", "c1", "l1", 10, 10),
        call("u1", "c1", "l1", 10, 20),
    ]

    watcher.close()
    assert recorder.record_watch_time.call_args_list[-1] == call("u1", "c1", "l1", 5, 25)
    assert watcher.total_watched_time == 25
    assert watcher.last_position == 25


def test_seeks_are_not_counted(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1")

    watcher.tick(True, 1.0)
    watcher.tick(True, 30.0)
    watcher.tick(True, 30.5)
    watcher.tick(True, 2.0)

    assert watcher.total_watched_time == 1
    watcher.close()
    recorder.record_watch_time.assert_called_once_with("u1", "c1", "l1", 1, 2)


def test_jump_at_threshold_counts_as_seek(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1", seek_threshold=2.0)

    watcher.tick(True, 2.0)
    watcher.tick(True, 3.9)

    assert watcher.total_watched_time == 1


def test_paused_ticks_only_move_position(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1")

    watcher.tick(False, 120.0)
    watcher.tick(True, 121.5)

    assert watcher.total_watched_time == 1
    assert watcher.last_position == 121


def test_fractional_seconds_carry_over_between_reports(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1", flush_interval=3)

    for position in (1.5, 3.0, 4.5, 6.0):
        watcher.tick(True, position)

    reported = sum(c.args[3] for c in recorder.record_watch_time.call_args_list)
    assert reported == 6


def test_disabled_tracker_never_reports(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1", enabled=False)

    _play(watcher, 0.0, 30.0)
    watcher.close()

    recorder.record_watch_time.assert_not_called()
    assert watcher.total_watched_time == 0


def test_close_without_playback_reports_nothing(recorder):
    watcher = WatchTimeTracker(recorder, "u1", "c1", "l1")

    watcher.tick(True, 0.4)
    watcher.close()

    recorder.record_watch_time.assert_not_called()


def test_feeds_progress_tracker():
    tracker = ProgressTracker(MemoryProgressStore())
    tracker.initialize("u1", "c1", ["l1"])
    watcher = WatchTimeTracker(tracker, "u1", "c1", "l1")

    _play(watcher, 0.0, 12.0)
    lesson = tracker.get_course_progress("u1", "c1").lessons[0]
    assert lesson.video_watch_time == 10
    assert lesson.last_watch_position == 10

    watcher.close()
    progress = tracker.get_course_progress("u1", "c1")
    assert progress.lessons[0].video_watch_time == 12
    assert progress.lessons[0].last_watch_position == 12
    assert progress.total_time_spent == 12
    assert progress.achievements == []
