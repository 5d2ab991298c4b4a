"""
Geometry Package

Responsibility: Screen/world coordinate transforms and polygon utilities.

Usage:
    from weather_region_viz.geometry import to_world, point_in_polygon
"""

from weather_region_viz.geometry.transform import to_screen, to_world
from weather_region_viz.geometry.polygon_utils import (
    CLOSURE_THRESHOLD_PX,
    PolygonCheck,
    centroid,
    distance,
    find_region_at,
    is_closing_point,
    point_in_polygon,
    validate_polygon,
)

__all__ = [
    "to_world",
    "to_screen",
    "CLOSURE_THRESHOLD_PX",
    "PolygonCheck",
    "centroid",
    "distance",
    "find_region_at",
    "is_closing_point",
    "point_in_polygon",
    "validate_polygon",
]
