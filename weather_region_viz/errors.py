"""
Exception hierarchy for the weather region dashboard.

All of these are recoverable: callers turn them into transient notifications
and the drawing session / region collection stay consistent.
"""


class WeatherRegionError(Exception):
    """Base class for all dashboard errors."""


# ═══════════════════════════════════════════════════════════════════════════
# ✏️ DRAWING ERRORS
# ═══════════════════════════════════════════════════════════════════════════


class DrawingError(WeatherRegionError):
    """A drawing-session command could not be applied."""


class InsufficientPoints(DrawingError):
    """Completion attempted with fewer than the minimum number of points."""

    def __init__(self, count: int, minimum: int) -> None:
        super().__init__(
            f"Polygon must have at least {minimum} points (has {count})"
        )
        self.count = count
        self.minimum = minimum


class TooManyPoints(DrawingError):
    """A point was added to a session that already holds the maximum."""

    def __init__(self, maximum: int) -> None:
        super().__init__(f"Polygon cannot have more than {maximum} points")
        self.maximum = maximum


class NotDrawing(DrawingError):
    """A drawing command arrived while no session is active."""


# ═══════════════════════════════════════════════════════════════════════════
# 📐 GEOMETRY / DATA ERRORS
# ═══════════════════════════════════════════════════════════════════════════


class DegenerateGeometry(WeatherRegionError):
    """Geometry utility called with too few vertices to be meaningful."""


class DataFetchFailure(WeatherRegionError):
    """The weather collaborator failed or returned a malformed payload."""


class UnknownRegion(WeatherRegionError, KeyError):
    """No region with the requested id."""


class UnknownDataSource(WeatherRegionError, KeyError):
    """No data-series definition with the requested id."""
