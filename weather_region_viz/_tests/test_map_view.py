"""
Tests for the MapView pointer/keyboard surface.

Canvas is the configured 1200x800, so screen (600, 400) is the world origin
at the home viewport.
"""

import pytest

from weather_region_viz.map_view import MapView
from weather_region_viz.models.data_models import Point


@pytest.fixture
def view(store):
    return MapView(store)


def _draw_square(view):
    """Screen square around the canvas center, world (-50,-50)..(50,50)."""
    view.start_drawing()
    for p in [(550, 350), (650, 350), (650, 450), (550, 450)]:
        view.on_pointer_down(Point(*p))
    return view.on_double_click()


class TestDrawing:
    """Drawing through pointer events."""

    def test_double_click_completes_region(self, view, store):
        region = _draw_square(view)
        assert region is not None
        assert store.regions == [region]
        assert region.centroid == Point(0, 0)
        assert not view.drawing.is_drawing

    def test_click_near_first_point_completes(self, view, store):
        view.start_drawing()
        for p in [(550, 350), (650, 350), (650, 450)]:
            view.on_pointer_down(Point(*p))
        region = view.on_pointer_down(Point(552, 352))
        assert region is not None
        assert len(region.vertices) == 3
        assert len(store.regions) == 1

    def test_double_click_with_two_points_notifies(self, view, store):
        view.start_drawing()
        view.on_pointer_down(Point(100, 100))
        view.on_pointer_down(Point(200, 100))
        assert view.on_double_click() is None
        assert view.drawing.is_drawing
        assert store.notifications.visible()[0].title == "Invalid Polygon"

    def test_thirteenth_click_notifies(self, view, store):
        view.start_drawing()
        for i in range(12):
            view.on_pointer_down(Point(100 + 50 * i, 100))
        assert view.on_pointer_down(Point(100, 600)) is None
        assert len(view.drawing.points) == 12
        assert store.notifications.visible()[0].title == "Point Limit"

    def test_escape_cancels(self, view, store):
        view.start_drawing()
        view.on_pointer_down(Point(100, 100))
        view.on_pointer_down(Point(200, 100))
        assert view.on_key("Escape") is True
        assert not view.drawing.is_drawing
        assert store.regions == []

    def test_escape_when_idle_is_ignored(self, view):
        assert view.on_key("Escape") is False

    def test_toggle_drawing(self, view):
        assert view.toggle_drawing() is True
        assert view.toggle_drawing() is False


class TestIdleClicks:
    """Hit test, confirm, delete; misses start a pan."""

    def test_declined_confirm_keeps_region(self, view, store):
        region = _draw_square(view)
        hit = view.on_pointer_down(Point(600, 400), confirm=lambda r: False)
        assert hit == region
        assert store.regions == [region]

    def test_confirmed_click_deletes_region(self, view, store):
        region = _draw_square(view)
        hit = view.on_pointer_down(Point(600, 400), confirm=lambda r: True)
        assert hit == region
        assert store.regions == []

    def test_miss_starts_pan(self, view):
        assert view.on_pointer_down(Point(100, 100)) is None
        assert view.dragging
        view.on_pointer_move(Point(110, 95))
        assert view.viewport.center == Point(-10, 5)
        view.on_pointer_up()
        assert not view.dragging

    def test_pan_is_scaled_by_zoom(self, view):
        view.zoom_in()
        view.zoom_in()
        zoom = view.viewport.zoom
        view.on_pointer_down(Point(100, 100))
        view.on_pointer_move(Point(130, 100))
        assert view.viewport.center.x == pytest.approx(-30 / zoom)

    def test_hover_tracks_region_when_idle(self, view):
        region = _draw_square(view)
        view.on_pointer_move(Point(600, 400))
        assert view.hovered_region_id == region.id
        view.on_pointer_move(Point(10, 10))
        assert view.hovered_region_id is None


class TestViewControls:
    """Wheel and button zoom, reset, resize."""

    def test_wheel_zoom_clamps(self, view):
        for _ in range(100):
            view.on_wheel(-1)
        assert view.viewport.zoom == pytest.approx(5.0)
        for _ in range(100):
            view.on_wheel(1)
        assert view.viewport.zoom == pytest.approx(0.1)

    def test_wheel_factors(self, view):
        assert view.on_wheel(120).zoom == pytest.approx(0.9)
        view.reset_view()
        assert view.on_wheel(-120).zoom == pytest.approx(1.1)

    def test_buttons_and_reset(self, view):
        assert view.zoom_in().zoom == pytest.approx(1.2)
        assert view.zoom_out().zoom == pytest.approx(1.0)
        view.on_pointer_down(Point(0, 0))
        view.on_pointer_move(Point(40, 40))
        reset = view.reset_view()
        assert reset.center == Point(0, 0)
        assert reset.zoom == 1.0

    def test_resize_changes_transform(self, view):
        view.resize(400, 300)
        view.start_drawing()
        for p in [(150, 100), (250, 100), (250, 200)]:
            view.on_pointer_down(Point(*p))
        region = view.on_double_click()
        assert region.vertices[0] == Point(-50, -50)


class TestRenderInputs:
    """Snapshot handed to the render loop."""

    def test_colors_aligned_with_regions(self, view, store):
        _draw_square(view)
        inputs = view.render_inputs()
        assert len(inputs.regions) == 1
        # No samples cached yet: base color of the temperature source
        assert inputs.region_colors == ("#ff6b6b",)

    def test_drawing_points_included(self, view):
        view.start_drawing()
        view.on_pointer_down(Point(10, 10))
        inputs = view.render_inputs()
        assert inputs.is_drawing
        assert inputs.drawing_points == (Point(10, 10),)
