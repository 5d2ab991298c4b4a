#!/usr/bin/env python3
"""
Drawing State Machine

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Accumulate digitized screen points into a candidate polygon,
enforce the point-count and closure rules, and emit a finished Region or a
cancellation.

States:
    IDLE ──start()──▶ DRAWING(points 0..max)
    DRAWING ──add_point()──▶ DRAWING            (append; refused at max)
    DRAWING ──add_point() near first point──▶ Completed(Region) ▶ IDLE
    DRAWING ──complete()──▶ Completed(Region) ▶ IDLE  (needs >= min points)
    DRAWING ──cancel()──▶ Cancelled ▶ IDLE

Coordinate Freeze (usability quirk, kept on purpose):
    Points are stored in SCREEN space and converted to world space only at
    completion, all with the viewport current at that moment. Panning or
    zooming mid-draw therefore shifts the already placed points relative to
    the map.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from weather_region_viz.errors import InsufficientPoints, NotDrawing, TooManyPoints
from weather_region_viz.geometry.polygon_utils import (
    CLOSURE_THRESHOLD_PX,
    MAX_VERTICES,
    MIN_VERTICES,
    centroid,
    is_closing_point,
    validate_polygon,
)
from weather_region_viz.geometry.transform import to_world
from weather_region_viz.models.data_models import CanvasSize, Point, Region, Viewport

logger = logging.getLogger(__name__)


def default_region_id() -> str:
    return f"region_{uuid.uuid4().hex[:8]}"


# ═══════════════════════════════════════════════════════════════════════════
# 🏷️ STATES AND OUTCOMES
# ═══════════════════════════════════════════════════════════════════════════


class DrawingState(Enum):
    """Whether a drawing session is open."""

    IDLE = "idle"
    DRAWING = "drawing"


@dataclass(frozen=True)
class DrawingSession:
    """Snapshot of the in-progress session (screen points)."""

    points: Tuple[Point, ...]
    active: bool


@dataclass(frozen=True)
class Completed:
    """Terminal outcome: a finished region."""

    region: Region


@dataclass(frozen=True)
class Cancelled:
    """Terminal outcome: the session was abandoned."""

    discarded_points: int


# ═══════════════════════════════════════════════════════════════════════════
# ✏️ STATE MACHINE
# ═══════════════════════════════════════════════════════════════════════════


class DrawingStateMachine:
    """
    Drawing-session state machine.

    Errors (InsufficientPoints, TooManyPoints, NotDrawing) never change
    state; the caller reports them and the session carries on.
    """

    def __init__(
        self,
        min_points: int = MIN_VERTICES,
        max_points: int = MAX_VERTICES,
        closure_threshold_px: float = CLOSURE_THRESHOLD_PX,
        id_factory: Callable[[], str] = default_region_id,
    ) -> None:
        self.min_points = min_points
        self.max_points = max_points
        self.closure_threshold_px = closure_threshold_px
        self._id_factory = id_factory
        self._state = DrawingState.IDLE
        self._points: List[Point] = []

    # ─────────────────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> DrawingState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state is DrawingState.DRAWING

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    @property
    def can_add_point(self) -> bool:
        """False when idle or when the session is full (UI disables clicks)."""
        return self.is_drawing and len(self._points) < self.max_points

    @property
    def remaining_points(self) -> int:
        return max(0, self.max_points - len(self._points)) if self.is_drawing else 0

    @property
    def session(self) -> DrawingSession:
        return DrawingSession(points=tuple(self._points), active=self.is_drawing)

    # ─────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Enter draw mode with an empty point list (no-op if already drawing)."""
        if self.is_drawing:
            return
        self._state = DrawingState.DRAWING
        self._points = []
        logger.debug("✏️ Drawing session started")

    def add_point(
        self,
        screen_point: Point,
        viewport: Viewport,
        canvas_size: Optional[CanvasSize],
        data_source_id: str,
    ) -> Optional[Completed]:
        """
        Handle a click while drawing.

        A click near the first point (with enough points placed) closes the
        polygon without storing the closing point.

        Args:
            screen_point: Click position in canvas pixels
            viewport: Viewport used if this click completes the polygon
            canvas_size: Canvas size used if this click completes the polygon
            data_source_id: Data source assigned if this click completes

        Returns:
            Completed if the click closed the polygon, otherwise None

        Raises:
            NotDrawing: no session is open
            TooManyPoints: the session already holds max_points points
        """
        if not self.is_drawing:
            raise NotDrawing("Not in drawing mode")

        screen_point = Point(*screen_point)
        if is_closing_point(self._points, screen_point, self.closure_threshold_px):
            return self.complete(viewport, canvas_size, data_source_id)

        if len(self._points) >= self.max_points:
            raise TooManyPoints(self.max_points)

        self._points.append(screen_point)
        logger.debug(f"✏️ Point {len(self._points)}/{self.max_points}: {screen_point}")
        return None

    def complete(
        self,
        viewport: Viewport,
        canvas_size: Optional[CanvasSize],
        data_source_id: str,
    ) -> Completed:
        """
        Finish the session and emit a Region.

        All screen points are converted with the viewport passed here, i.e.
        the viewport at completion time, not at click time.

        Raises:
            NotDrawing: no session is open
            InsufficientPoints: fewer than min_points points; session stays open
        """
        if not self.is_drawing:
            raise NotDrawing("Not in drawing mode")
        if len(self._points) < self.min_points:
            raise InsufficientPoints(len(self._points), self.min_points)

        vertices = tuple(to_world(p, viewport, canvas_size) for p in self._points)
        region = Region(
            id=self._id_factory(),
            vertices=vertices,
            centroid=centroid(vertices),
            data_source_id=data_source_id,
        )

        check = validate_polygon(vertices, self.min_points, self.max_points)
        if not check.is_simple:
            logger.warning(f"⚠️ {region.label} is not a simple polygon: {check.reason}")

        self._reset()
        logger.info(f"✅ {region.label} completed with {len(vertices)} points")
        return Completed(region)

    def cancel(self) -> Cancelled:
        """Discard the session and return to IDLE (safe to call when idle)."""
        discarded = len(self._points)
        if self.is_drawing:
            logger.debug(f"✏️ Drawing cancelled, {discarded} point(s) discarded")
        self._reset()
        return Cancelled(discarded_points=discarded)

    def _reset(self) -> None:
        self._points = []
        self._state = DrawingState.IDLE
