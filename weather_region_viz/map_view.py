#!/usr/bin/env python3
"""
Map View Controller

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Pointer and keyboard surface of the map. Owns the viewport,
the canvas size, the drawing state machine and the transient interaction
state (hovered region, pan drag, last pointer position), and turns input
events into store mutations and render inputs.

Event semantics:
- pointer down while drawing: add a point, or close the polygon when the
  click lands within 15 px of the first point (3+ points placed)
- pointer down while idle: first region under the pointer (list order) is
  offered to the confirm callback and deleted if confirmed; a miss starts
  a pan drag
- pointer move: pans while dragging, tracks the hovered region when idle
- wheel: zoom about the canvas center (x0.9 scrolling down, x1.1 up)
- double click: force completion of the drawing
- Escape: cancel the drawing

Drawing errors never propagate out of event handlers; they become
notifications and the session carries on.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import logging
from typing import Callable, Optional

from weather_region_viz.config_types import AppConfig
from weather_region_viz.drawing.state_machine import Completed, DrawingStateMachine
from weather_region_viz.errors import InsufficientPoints, TooManyPoints
from weather_region_viz.geometry.polygon_utils import find_region_at
from weather_region_viz.geometry.transform import to_world
from weather_region_viz.models.data_models import CanvasSize, Point, Region, Viewport
from weather_region_viz.state_store import DashboardStore
from weather_region_viz.visualization.render import RenderInputs

logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[Region], bool]


def _never_confirm(region: Region) -> bool:
    return False


class MapView:
    """Interactive map state bound to one DashboardStore."""

    def __init__(
        self,
        store: DashboardStore,
        confirm_delete: ConfirmDelete = _never_confirm,
        drawing: Optional[DrawingStateMachine] = None,
    ) -> None:
        self.store = store
        self.config: AppConfig = store.config
        self.confirm_delete = confirm_delete

        vp = self.config.viewport
        self._home = Viewport(
            center=Point(vp.center_x, vp.center_y),
            zoom=vp.zoom,
            min_zoom=vp.min_zoom,
            max_zoom=vp.max_zoom,
        )
        self.viewport = self._home
        self.canvas_size = CanvasSize(vp.canvas_width, vp.canvas_height)

        dc = self.config.drawing
        self.drawing = drawing or DrawingStateMachine(
            min_points=dc.min_points,
            max_points=dc.max_points,
            closure_threshold_px=dc.closure_threshold_px,
        )

        self.hovered_region_id: Optional[str] = None
        self.dragging = False
        self.pointer: Optional[Point] = None

    # ═══════════════════════════════════════════════════════════════════════
    # 🖱️ POINTER EVENTS
    # ═══════════════════════════════════════════════════════════════════════

    def on_pointer_down(
        self, point: Point, confirm: Optional[ConfirmDelete] = None
    ) -> Optional[Region]:
        """
        Handle a primary-button press at a screen point.

        Returns:
            The region completed by this click (drawing) or the region hit by
            it (idle, whether or not deletion was confirmed), else None
        """
        point = Point(*point)
        self.pointer = point

        if self.drawing.is_drawing:
            try:
                result = self.drawing.add_point(
                    point, self.viewport, self.canvas_size,
                    self.store.selected_data_source_id,
                )
            except TooManyPoints as e:
                self.store.notifications.warning("Point Limit", str(e))
                return None
            return self._accept(result) if result is not None else None

        world = to_world(point, self.viewport, self.canvas_size)
        hit = find_region_at(world, self.store.regions)
        if hit is None:
            self.dragging = True
            return None

        confirm = confirm or self.confirm_delete
        if confirm(hit):
            self.store.delete_region(hit.id)
            if self.hovered_region_id == hit.id:
                self.hovered_region_id = None
        return hit

    def on_pointer_move(self, point: Point) -> None:
        point = Point(*point)
        previous = self.pointer
        self.pointer = point

        if not self.drawing.is_drawing and not self.dragging:
            world = to_world(point, self.viewport, self.canvas_size)
            hit = find_region_at(world, self.store.regions)
            self.hovered_region_id = hit.id if hit else None

        if self.dragging and not self.drawing.is_drawing and previous is not None:
            self.viewport = self.viewport.panned_by(point.x - previous.x, point.y - previous.y)

    def on_pointer_up(self) -> None:
        self.dragging = False

    def on_wheel(self, delta_y: float) -> Viewport:
        vp = self.config.viewport
        factor = vp.wheel_zoom_out_factor if delta_y > 0 else vp.wheel_zoom_in_factor
        self.viewport = self.viewport.zoomed_by(factor)
        return self.viewport

    def on_double_click(self) -> Optional[Region]:
        """Force completion; too few points becomes a notification."""
        if not self.drawing.is_drawing:
            return None
        return self.complete_drawing()

    def on_key(self, key: str) -> bool:
        """Returns True when the key was handled."""
        if key == "Escape" and self.drawing.is_drawing:
            self.cancel_drawing()
            return True
        return False

    # ═══════════════════════════════════════════════════════════════════════
    # 🔍 VIEW CONTROLS
    # ═══════════════════════════════════════════════════════════════════════

    def zoom_in(self) -> Viewport:
        self.viewport = self.viewport.zoomed_by(self.config.viewport.button_zoom_factor)
        return self.viewport

    def zoom_out(self) -> Viewport:
        self.viewport = self.viewport.zoomed_by(1 / self.config.viewport.button_zoom_factor)
        return self.viewport

    def reset_view(self) -> Viewport:
        self.viewport = self._home
        return self.viewport

    def resize(self, width: float, height: float) -> CanvasSize:
        self.canvas_size = CanvasSize(float(width), float(height))
        return self.canvas_size

    # ═══════════════════════════════════════════════════════════════════════
    # ✏️ DRAWING CONTROLS
    # ═══════════════════════════════════════════════════════════════════════

    def start_drawing(self) -> None:
        self.drawing.start()
        self.dragging = False
        self.hovered_region_id = None

    def complete_drawing(self) -> Optional[Region]:
        try:
            result = self.drawing.complete(
                self.viewport, self.canvas_size, self.store.selected_data_source_id
            )
        except InsufficientPoints as e:
            self.store.notifications.warning("Invalid Polygon", str(e))
            return None
        return self._accept(result)

    def cancel_drawing(self) -> int:
        """Discard the session; returns how many points were dropped."""
        return self.drawing.cancel().discarded_points

    def toggle_drawing(self) -> bool:
        """Drawing button: enter draw mode, or cancel the open session."""
        if self.drawing.is_drawing:
            self.cancel_drawing()
        else:
            self.start_drawing()
        return self.drawing.is_drawing

    def _accept(self, result: Completed) -> Region:
        return self.store.add_region(result.region)

    # ═══════════════════════════════════════════════════════════════════════
    # 🖌️ RENDER INPUTS
    # ═══════════════════════════════════════════════════════════════════════

    def render_inputs(self) -> RenderInputs:
        """Snapshot for the render loop, colors resolved at the current time."""
        resolve = self.store.color_resolver()
        regions = tuple(self.store.regions)
        return RenderInputs(
            canvas_size=self.canvas_size,
            viewport=self.viewport,
            regions=regions,
            region_colors=tuple(resolve(r) for r in regions),
            hovered_region_id=self.hovered_region_id,
            is_drawing=self.drawing.is_drawing,
            drawing_points=tuple(self.drawing.points),
            pointer=self.pointer,
            dark_mode=self.store.dark_mode,
            style=self.config.render,
        )

    def to_dict(self) -> dict:
        session = self.drawing.session
        return {
            "viewport": self.viewport.to_dict(),
            "canvas": {"width": self.canvas_size.width, "height": self.canvas_size.height},
            "drawing": {
                "active": session.active,
                "points": [p.to_list() for p in session.points],
                "remaining": self.drawing.remaining_points,
                "canAddPoint": self.drawing.can_add_point,
            },
            "hoveredRegionId": self.hovered_region_id,
            "dragging": self.dragging,
        }
