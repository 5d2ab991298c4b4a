#!/usr/bin/env python3
"""
Coordinate Transform

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Bidirectional mapping between screen pixel space and the
pannable/zoomable world plane.

    world  = (screen - canvas_center) / zoom + viewport_center
    screen = (world - viewport_center) * zoom + canvas_center

The two functions are exact inverses for a fixed viewport and canvas size.
A missing or zero-sized canvas maps everything to the origin.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Optional

from weather_region_viz.models.data_models import CanvasSize, Point, Viewport

ORIGIN = Point(0.0, 0.0)


def to_world(
    screen_point: Point,
    viewport: Viewport,
    canvas_size: Optional[CanvasSize],
) -> Point:
    """
    Convert a canvas-relative screen point to world coordinates.

    Args:
        screen_point: Pixel position relative to the canvas top-left
        viewport: Current viewport (center + zoom)
        canvas_size: Canvas pixel size, or None before the canvas exists

    Returns:
        World-space point, or the origin for an empty canvas
    """
    if canvas_size is None or canvas_size.is_empty:
        return ORIGIN
    cx, cy = canvas_size.center
    return Point(
        (screen_point.x - cx) / viewport.zoom + viewport.center.x,
        (screen_point.y - cy) / viewport.zoom + viewport.center.y,
    )


def to_screen(
    world_point: Point,
    viewport: Viewport,
    canvas_size: Optional[CanvasSize],
) -> Point:
    """
    Convert a world point to canvas-relative screen pixels.

    Args:
        world_point: World-space position
        viewport: Current viewport (center + zoom)
        canvas_size: Canvas pixel size, or None before the canvas exists

    Returns:
        Screen-space point, or the origin for an empty canvas
    """
    if canvas_size is None or canvas_size.is_empty:
        return ORIGIN
    cx, cy = canvas_size.center
    return Point(
        (world_point.x - viewport.center.x) * viewport.zoom + cx,
        (world_point.y - viewport.center.y) * viewport.zoom + cy,
    )
