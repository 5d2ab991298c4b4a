#!/usr/bin/env python3
"""
Polygon Geometry Utilities

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Pure geometry helpers used by the map view and the drawing
state machine. All functions are total over arbitrary input except
centroid([]), which has no meaningful answer.

Key Functions:
1. point_in_polygon - even-odd ray casting (hover + click hit tests)
2. centroid - arithmetic mean of vertices (numpy)
3. is_closing_point - click-near-first-point closure detection
4. validate_polygon - advisory validity report (Shapely)
5. find_region_at - first region in collection order under a point

Edge Membership:
    Points lying exactly on an edge fall wherever the crossing-number
    test puts them. Edge membership is implementation-defined, not
    guaranteed either way.

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.validation import explain_validity

from weather_region_viz.errors import DegenerateGeometry
from weather_region_viz.models.data_models import Point, Region

# ═══════════════════════════════════════════════════════════════════════════
# 🔧 CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

CLOSURE_THRESHOLD_PX = 15.0
MIN_VERTICES = 3
MAX_VERTICES = 12


# ═══════════════════════════════════════════════════════════════════════════
# 📐 BASIC MEASURES
# ═══════════════════════════════════════════════════════════════════════════


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points in the same space."""
    return math.hypot(a.x - b.x, a.y - b.y)


def centroid(vertices: Sequence[Point]) -> Point:
    """
    Arithmetic mean of the vertex coordinates.

    Args:
        vertices: One or more points

    Returns:
        Mean point

    Raises:
        DegenerateGeometry: vertices is empty
    """
    if len(vertices) == 0:
        raise DegenerateGeometry("centroid of an empty vertex list is undefined")
    mean_x, mean_y = np.asarray(vertices, dtype=float).mean(axis=0)
    return Point(float(mean_x), float(mean_y))


# ═══════════════════════════════════════════════════════════════════════════
# 🎯 HIT TESTING
# ═══════════════════════════════════════════════════════════════════════════


def point_in_polygon(point: Point, vertices: Sequence[Point]) -> bool:
    """
    Even-odd ray casting test.

    A horizontal ray is cast from the point; each edge it crosses toggles
    the inside flag. Fewer than 3 vertices is degenerate and never
    contains anything.

    Args:
        point: Query point (world space)
        vertices: Polygon vertices in order, without a repeated closing vertex

    Returns:
        True if the point is inside
    """
    n = len(vertices)
    if n < MIN_VERTICES:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def find_region_at(point: Point, regions: Iterable[Region]) -> Optional[Region]:
    """First region (in collection order) containing the world point."""
    for region in regions:
        if point_in_polygon(point, region.vertices):
            return region
    return None


# ═══════════════════════════════════════════════════════════════════════════
# ✏️ DRAWING SUPPORT
# ═══════════════════════════════════════════════════════════════════════════


def is_closing_point(
    points: Sequence[Point],
    new_point: Point,
    threshold_px: float = CLOSURE_THRESHOLD_PX,
) -> bool:
    """
    Decide whether a new click closes the in-progress polygon.

    Args:
        points: Screen points placed so far (first point included)
        new_point: Screen point of the new click
        threshold_px: Pixel distance to the first point that counts as closing

    Returns:
        True when at least MIN_VERTICES points exist and the click lands
        strictly within threshold_px of the first point
    """
    if len(points) < MIN_VERTICES:
        return False
    return distance(new_point, points[0]) < threshold_px


@dataclass(frozen=True)
class PolygonCheck:
    """Advisory validity report for a vertex sequence."""

    vertex_count: int
    count_ok: bool
    is_simple: bool
    area: float
    reason: str

    @property
    def is_valid(self) -> bool:
        return self.count_ok and self.is_simple and self.area > 0


def validate_polygon(
    vertices: Sequence[Point],
    min_vertices: int = MIN_VERTICES,
    max_vertices: int = MAX_VERTICES,
) -> PolygonCheck:
    """
    Report vertex count, self-intersection and area for a polygon.

    Regions are never rejected for self-intersection; this is used for
    logging and for the region details returned by the API.

    Args:
        vertices: Polygon vertices (world space)
        min_vertices: Inclusive lower vertex bound
        max_vertices: Inclusive upper vertex bound

    Returns:
        PolygonCheck
    """
    count = len(vertices)
    count_ok = min_vertices <= count <= max_vertices
    if count < MIN_VERTICES:
        return PolygonCheck(count, count_ok, False, 0.0, "Too few points")

    shape = ShapelyPolygon([tuple(v) for v in vertices])
    return PolygonCheck(
        vertex_count=count,
        count_ok=count_ok,
        is_simple=shape.is_valid,
        area=float(shape.area),
        reason=explain_validity(shape),
    )
