import logging
import math
from typing import Optional

from app.core.config import settings
from app.services.progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)


class WatchTimeTracker:
    """Batches video playback ticks into ``record_watch_time`` calls.

    One instance follows a single lesson's playback. Position jumps of
    ``seek_threshold`` seconds or more are treated as seeks and not counted.
    Whole seconds are reported every ``flush_interval`` seconds of counted
    playback, and any remainder is reported by ``close()``.
    """

    def __init__(
        self,
        tracker: ProgressTracker,
        user_id: str,
        course_id: str,
        lesson_id: str,
        enabled: bool = True,
        flush_interval: Optional[float] = None,
        seek_threshold: Optional[float] = None,
    ):
        self.tracker = tracker
        self.user_id = user_id
        self.course_id = course_id
        self.lesson_id = lesson_id
        self.enabled = enabled
        self.flush_interval = flush_interval if flush_interval is not None else settings.WATCH_FLUSH_INTERVAL_SECONDS
        self.seek_threshold = seek_threshold if seek_threshold is not None else settings.WATCH_SEEK_THRESHOLD_SECONDS

        self._accumulated = 0.0
        self._reported = 0
        self._last_time = 0.0

    @property
    def total_watched_time(self) -> int:
        return math.floor(self._accumulated)

    @property
    def last_position(self) -> int:
        return math.floor(self._last_time)

    def tick(self, is_playing: bool, current_time: float) -> None:
        if not self.enabled:
            return

        if is_playing:
            time_diff = current_time - self._last_time
            if 0 < time_diff < self.seek_threshold:
                self._accumulated += time_diff
            self._last_time = current_time

            if self._accumulated - self._reported >= self.flush_interval:
                self._flush(math.floor(current_time))
        else:
            self._last_time = current_time

    def close(self) -> None:
        if not self.enabled:
            return
        if self._accumulated > self._reported:
            self._flush(math.floor(self._last_time))

    def _flush(self, position: int) -> None:
        seconds = math.floor(self._accumulated - self._reported)
        if seconds <= 0:
            return
        logger.debug(f"Reporting {seconds}s of lesson {self.lesson_id} at position {position}")
        self.tracker.record_watch_time(self.user_id, self.course_id, self.lesson_id, seconds, position)
        self._reported += seconds
