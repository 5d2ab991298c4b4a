"""
Tests for Timeline navigation and the PlaybackTimer.

The timer runs on a FakeScheduler, so ticks fire only when the test calls
run_next().
"""

from datetime import timedelta

import pytest

from weather_region_viz.models.data_models import TimeRange
from weather_region_viz.timeline import PlaybackTimer, Timeline
from weather_region_viz._tests.conftest import NOW


@pytest.fixture
def short_range():
    return TimeRange(NOW, NOW + timedelta(hours=3))


class TestTimeline:
    """Derived values and clock moves."""

    def test_hour_and_progress(self, short_range):
        timeline = Timeline(short_range, NOW + timedelta(hours=1))
        assert timeline.total_hours == 3
        assert timeline.current_hour == 1
        assert timeline.progress_pct == pytest.approx(50.0)

    def test_current_hour_is_clamped(self, short_range):
        assert Timeline(short_range, NOW - timedelta(hours=5)).current_hour == 0
        assert Timeline(short_range, short_range.end).current_hour == 2

    def test_advance_clamps_at_end(self, short_range):
        timeline = Timeline(short_range, NOW + timedelta(hours=2))
        assert timeline.advance() is True
        assert timeline.current_time == short_range.end
        assert timeline.can_play is False
        assert timeline.advance() is False
        assert timeline.current_time == short_range.end

    def test_skips_and_seek(self, short_range):
        timeline = Timeline(short_range, NOW + timedelta(hours=1))
        assert timeline.skip_to_end() == short_range.end
        assert timeline.skip_to_start() == NOW
        assert timeline.seek_hour(2) == NOW + timedelta(hours=2)
        assert timeline.seek_hour(99) == NOW + timedelta(hours=2)
        assert timeline.seek_hour(-4) == NOW


class TestPlaybackTimer:
    """Repeating tick with guaranteed cancellation."""

    def test_plays_to_range_end_then_stops(self, scheduler, short_range):
        timeline = Timeline(short_range, NOW)
        stopped = []
        timer = PlaybackTimer(scheduler, timeline.advance, on_stop=lambda: stopped.append(1))
        timer.start()

        while scheduler.run_next():
            pass

        assert timeline.current_time == short_range.end
        assert timer.running is False
        assert timer.ticks == 4
        assert stopped == [1]
        assert scheduler.pending == []

    def test_stop_cancels_pending_tick(self, scheduler):
        timer = PlaybackTimer(scheduler, lambda: True)
        timer.start()
        handle = scheduler.handles[-1]
        timer.stop()
        assert handle.cancelled
        assert timer.running is False

    def test_context_exit_cancels(self, scheduler):
        with PlaybackTimer(scheduler, lambda: True) as timer:
            timer.start()
            scheduler.run_next()
            assert timer.running
        assert scheduler.pending == []
        assert timer.running is False

    def test_speed_sets_interval(self, scheduler):
        timer = PlaybackTimer(scheduler, lambda: True, base_interval_s=1.0)
        timer.set_speed(4.0)
        timer.start()
        assert scheduler.handles[-1].delay == pytest.approx(0.25)

        timer.set_speed(0.5)
        assert scheduler.handles[-2].cancelled
        assert scheduler.handles[-1].delay == pytest.approx(2.0)

    def test_unknown_speed_rejected(self, scheduler):
        timer = PlaybackTimer(scheduler, lambda: True)
        with pytest.raises(ValueError):
            timer.set_speed(3.0)

    def test_start_twice_schedules_once(self, scheduler):
        timer = PlaybackTimer(scheduler, lambda: True)
        timer.start()
        timer.start()
        assert len(scheduler.pending) == 1
