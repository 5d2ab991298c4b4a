"""
Tests for the coordinate transform and polygon utilities.

Run with: python -m pytest weather_region_viz/_tests/test_geometry.py -v
"""

import pytest

from weather_region_viz.errors import DegenerateGeometry
from weather_region_viz.geometry import (
    centroid,
    find_region_at,
    is_closing_point,
    point_in_polygon,
    to_screen,
    to_world,
    validate_polygon,
)
from weather_region_viz.models.data_models import CanvasSize, Point, Viewport
from weather_region_viz._tests.conftest import make_region

CANVAS = CanvasSize(800, 600)
SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


class TestTransform:
    """Screen <-> world conversion."""

    def test_canvas_center_maps_to_viewport_center(self):
        viewport = Viewport(center=Point(10, 20), zoom=2.0)
        assert to_world(Point(400, 300), viewport, CANVAS) == Point(10, 20)

    def test_zoom_scales_offsets(self):
        viewport = Viewport(center=Point(0, 0), zoom=2.0)
        assert to_world(Point(500, 300), viewport, CANVAS) == Point(50, 0)

    @pytest.mark.parametrize("zoom", [0.1, 1.0, 3.7, 5.0])
    def test_round_trip(self, zoom):
        """to_screen(to_world(p)) returns p for any zoom in range."""
        viewport = Viewport(center=Point(-123.4, 56.7), zoom=zoom)
        p = Point(217.0, 411.5)
        back = to_screen(to_world(p, viewport, CANVAS), viewport, CANVAS)
        assert back.x == pytest.approx(p.x)
        assert back.y == pytest.approx(p.y)

    @pytest.mark.parametrize("canvas", [None, CanvasSize(0, 600), CanvasSize(800, 0)])
    def test_empty_canvas_returns_origin(self, canvas):
        viewport = Viewport(center=Point(5, 5), zoom=1.0)
        assert to_world(Point(10, 10), viewport, canvas) == Point(0, 0)
        assert to_screen(Point(10, 10), viewport, canvas) == Point(0, 0)

    def test_viewport_clamps_zoom(self):
        assert Viewport(zoom=50).zoom == 5.0
        assert Viewport(zoom=0.001).zoom == 0.1


class TestPointInPolygon:
    """Even-odd hit testing."""

    def test_inside_square(self):
        assert point_in_polygon(Point(5, 5), SQUARE) is True

    def test_outside_square(self):
        assert point_in_polygon(Point(15, 5), SQUARE) is False

    def test_degenerate_polygons_contain_nothing(self):
        assert point_in_polygon(Point(0, 0), []) is False
        assert point_in_polygon(Point(0, 0), SQUARE[:2]) is False

    def test_first_region_in_list_order_wins(self):
        first = make_region("region_a")
        second = make_region("region_b")
        assert find_region_at(Point(5, 5), [first, second]) is first
        assert find_region_at(Point(50, 50), [first, second]) is None


class TestCentroidAndClosure:
    """Centroid, closure detection and advisory validation."""

    def test_centroid_is_vertex_mean(self):
        assert centroid(SQUARE) == Point(5, 5)

    def test_centroid_of_nothing_raises(self):
        with pytest.raises(DegenerateGeometry):
            centroid([])

    def test_closure_needs_three_points(self):
        assert is_closing_point(SQUARE[:2], Point(1, 1)) is False
        assert is_closing_point(SQUARE[:3], Point(1, 1)) is True

    def test_closure_threshold_is_strict(self):
        points = [Point(0, 0), Point(100, 0), Point(100, 100)]
        assert is_closing_point(points, Point(15, 0)) is False
        assert is_closing_point(points, Point(14.9, 0)) is True

    def test_validate_simple_square(self):
        check = validate_polygon(SQUARE)
        assert check.is_valid
        assert check.area == pytest.approx(100.0)

    def test_validate_bow_tie_is_not_simple(self):
        bow_tie = [Point(0, 0), Point(10, 10), Point(10, 0), Point(0, 10)]
        check = validate_polygon(bow_tie)
        assert check.count_ok
        assert not check.is_simple
