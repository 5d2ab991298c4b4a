"""
Shared fixtures for the weather region dashboard tests.

Provides a fixed clock, a scriptable weather fetcher and a fake scheduler so
store refreshes and playback run deterministically without real timers.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from weather_region_viz.config_types import APP_CONFIG
from weather_region_viz.errors import DataFetchFailure
from weather_region_viz.models.data_models import Point, Region, SampleSeries
from weather_region_viz.state_store import DashboardStore

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def hourly_payload(
    start: datetime, values: Dict[str, Sequence[Optional[float]]]
) -> Dict[str, Any]:
    """Payload with one timestamp per value, starting at `start`."""
    length = max(len(v) for v in values.values())
    times = [(start + timedelta(hours=i)).isoformat() for i in range(length)]
    return {"hourly": {"time": times, **{k: list(v) for k, v in values.items()}}}


def make_region(
    region_id: str = "region_square1",
    vertices: Sequence[Sequence[float]] = ((0, 0), (10, 0), (10, 10), (0, 10)),
    data_source_id: str = "temperature",
) -> Region:
    points = tuple(Point(*v) for v in vertices)
    cx = sum(p.x for p in points) / len(points)
    cy = sum(p.y for p in points) / len(points)
    return Region(
        id=region_id, vertices=points, centroid=Point(cx, cy),
        data_source_id=data_source_id,
    )


class FakeFetcher:
    """
    Async weather collaborator double.

    values_for(lat, lon) gives the field arrays for a call; set fail=True to
    raise DataFetchFailure instead.
    """

    def __init__(
        self,
        values_for: Optional[Callable[[float, float], Dict[str, List[float]]]] = None,
        fail: bool = False,
    ) -> None:
        self.values_for = values_for or (lambda lat, lon: {"temperature_2m": [20.0] * 24})
        self.fail = fail
        self.calls: List[tuple] = []

    async def __call__(self, latitude, longitude, start, end) -> SampleSeries:
        self.calls.append((latitude, longitude, start, end))
        if self.fail:
            raise DataFetchFailure("service unavailable")
        return SampleSeries.from_payload(
            hourly_payload(start, self.values_for(latitude, longitude))
        )


class FakeHandle:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records call_later requests; run_next() fires the oldest live one."""

    def __init__(self) -> None:
        self.handles: List[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and h.callback is not None]

    def run_next(self) -> bool:
        for handle in self.pending:
            callback, handle.callback = handle.callback, None
            callback()
            return True
        return False


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def store(fetcher) -> DashboardStore:
    """Store on a fixed clock with the shipped data sources."""
    return DashboardStore(config=APP_CONFIG, fetcher=fetcher, now=NOW)


@pytest.fixture
def square() -> Region:
    return make_region()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
