#!/usr/bin/env python3
"""
Timeline and Playback

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Hour-granular navigation of the simulated clock and the
repeating playback tick.

Key Components:
1. Timeline - derived values (hour index, progress) and clock moves
   (seek, skip to start/end, advance one hour clamped at the range end)
2. PlaybackTimer - cancellable repeating timer driven by any scheduler with
   call_later(delay, callback) -> handle.cancel() (an asyncio event loop in
   production, a fake in tests). Cancelled on stop() and on context exit.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from weather_region_viz.models.data_models import HOUR, TimeRange

logger = logging.getLogger(__name__)

DEFAULT_SPEEDS = (0.5, 1.0, 2.0, 4.0)


# ═══════════════════════════════════════════════════════════════════════════
# ⏱️ TIMELINE
# ═══════════════════════════════════════════════════════════════════════════


class Timeline:
    """Clock position within a time range, in whole hours."""

    def __init__(self, time_range: TimeRange, current_time: datetime) -> None:
        self.time_range = time_range
        self.current_time = current_time

    @property
    def total_hours(self) -> int:
        return self.time_range.total_hours

    @property
    def current_hour(self) -> int:
        """Hour index clamped to [0, total_hours - 1]."""
        raw = int((self.current_time - self.time_range.start) // HOUR)
        return max(0, min(self.total_hours - 1, raw))

    @property
    def progress_pct(self) -> float:
        if self.total_hours <= 1:
            return 0.0
        return self.current_hour / (self.total_hours - 1) * 100

    @property
    def at_start(self) -> bool:
        return self.current_time <= self.time_range.start

    @property
    def at_end(self) -> bool:
        return self.current_time >= self.time_range.end

    @property
    def can_play(self) -> bool:
        return not self.at_end

    def seek_hour(self, hour: int) -> datetime:
        hour = max(0, min(max(0, self.total_hours - 1), int(hour)))
        self.current_time = self.time_range.start + timedelta(hours=hour)
        return self.current_time

    def skip_to_start(self) -> datetime:
        self.current_time = self.time_range.start
        return self.current_time

    def skip_to_end(self) -> datetime:
        self.current_time = self.time_range.end
        return self.current_time

    def advance(self) -> bool:
        """
        Move the clock forward one hour.

        Returns:
            False when the step would pass the range end (the clock is then
            clamped to the end), True otherwise
        """
        following = self.current_time + HOUR
        if following > self.time_range.end:
            self.current_time = self.time_range.end
            return False
        self.current_time = following
        return True

    def to_dict(self) -> dict:
        return {
            "range": self.time_range.to_dict(),
            "currentTime": self.current_time.isoformat(),
            "currentHour": self.current_hour,
            "totalHours": self.total_hours,
            "progressPct": round(self.progress_pct, 1),
        }


# ═══════════════════════════════════════════════════════════════════════════
# ⏯️ PLAYBACK TIMER
# ═══════════════════════════════════════════════════════════════════════════


class PlaybackTimer:
    """
    Repeating tick with guaranteed cancellation.

    on_tick returns False to stop playback (e.g. the clock reached the
    range end). Use as a context manager to scope the timer:

        with PlaybackTimer(loop, on_tick) as timer:
            timer.start()
            ...
        # timer cancelled here
    """

    def __init__(
        self,
        scheduler: Any,
        on_tick: Callable[[], bool],
        base_interval_s: float = 1.0,
        speeds: Sequence[float] = DEFAULT_SPEEDS,
        speed: float = 1.0,
        on_stop: Optional[Callable[[], None]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._on_stop = on_stop
        self.base_interval_s = base_interval_s
        self.speeds = tuple(speeds)
        self.speed = speed
        self._handle: Optional[Any] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def interval_s(self) -> float:
        return self.base_interval_s / self.speed

    def set_speed(self, speed: float) -> None:
        """Change speed; a running timer picks it up from the next tick."""
        if speed not in self.speeds:
            raise ValueError(f"speed must be one of {self.speeds}, got {speed}")
        self.speed = speed
        if self.running:
            self._cancel_handle()
            self._schedule()

    def start(self) -> None:
        if self.running:
            return
        logger.debug(f"⏯️ Playback started at {self.speed}x")
        self._schedule()

    def stop(self) -> None:
        if not self.running:
            return
        self._cancel_handle()
        logger.debug(f"⏸️ Playback stopped after {self.ticks} tick(s)")
        if self._on_stop is not None:
            self._on_stop()

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.interval_s, self._fire)

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.ticks += 1
        if self._on_tick():
            self._schedule()
        else:
            logger.debug("⏹️ Playback reached the end of the range")
            if self._on_stop is not None:
                self._on_stop()

    def __enter__(self) -> "PlaybackTimer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
