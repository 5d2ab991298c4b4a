"""
Tests for the Flask API, run against a live DashboardRuntime loop with a
fake weather fetcher.

Run with: python -m pytest weather_region_viz/_tests/test_server.py -v
"""

import time
from dataclasses import replace

import pytest

from weather_region_viz import server
from weather_region_viz.config_types import APP_CONFIG
from weather_region_viz.runtime import DashboardRuntime
from weather_region_viz.state_store import DashboardStore
from weather_region_viz._tests.conftest import NOW, FakeFetcher

SQUARE_CLICKS = [(550, 350), (650, 350), (650, 450)]


def _serve(fetcher=None, config=APP_CONFIG):
    store = DashboardStore(config, fetcher or FakeFetcher(), now=NOW)
    server.initialize_services(dashboard=DashboardRuntime(config=config, store=store))
    server.app.config["TESTING"] = True
    return server.app.test_client()


@pytest.fixture
def client():
    with _serve() as test_client:
        yield test_client
    server.shutdown_services()


@pytest.fixture
def ramp_client():
    """Temperature equals the hour index (0..23) from the range start."""
    fetcher = FakeFetcher(lambda lat, lon: {"temperature_2m": [float(h) for h in range(24)]})
    with _serve(fetcher) as test_client:
        yield test_client
    server.shutdown_services()


@pytest.fixture
def export_client(tmp_path):
    config = replace(APP_CONFIG, server=replace(APP_CONFIG.server, export_dir=str(tmp_path)))
    with _serve(config=config) as test_client:
        yield test_client
    server.shutdown_services()


def _draw_region(client) -> str:
    client.post("/api/drawing", json={"action": "start"})
    for x, y in SQUARE_CLICKS:
        client.post("/api/pointer", json={"type": "down", "x": x, "y": y})
    response = client.post("/api/pointer", json={"type": "dblclick"})
    return response.get_json()["completedRegionId"]


def _wait_for_samples(client, region_id: str) -> None:
    for _ in range(100):
        if region_id in client.get("/api/state").get_json()["cachedRegionIds"]:
            return
        time.sleep(0.02)
    raise AssertionError(f"no samples cached for {region_id}")


class TestPageAndConfig:
    """Static routes."""

    def test_index_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert b"<canvas" in response.data

    def test_config(self, client):
        data = client.get("/api/config").get_json()
        assert data["defaultDataSource"] == "temperature"
        assert data["drawing"]["max_points"] == 12


class TestDrawingFlow:
    """Pointer events through to a cached region."""

    def test_draw_and_fetch(self, client):
        region_id = _draw_region(client)
        assert region_id.startswith("region_")

        state = client.get("/api/state").get_json()
        assert [r["id"] for r in state["regions"]] == [region_id]
        assert state["map"]["drawing"]["active"] is False

        for _ in range(100):
            if client.get("/api/state").get_json()["cachedRegionIds"]:
                break
            time.sleep(0.02)
        assert client.get("/api/state").get_json()["cachedRegionIds"] == [region_id]

    def test_idle_click_reports_hit_without_deleting(self, client):
        region_id = _draw_region(client)
        data = client.post("/api/pointer", json={"type": "down", "x": 620, "y": 380}).get_json()
        assert data["hitRegionId"] == region_id
        assert len(client.get("/api/state").get_json()["regions"]) == 1

        assert client.delete(f"/api/regions/{region_id}").status_code == 200
        assert client.get("/api/state").get_json()["regions"] == []

    def test_escape_cancels_drawing(self, client):
        client.post("/api/drawing", json={"action": "start"})
        client.post("/api/pointer", json={"type": "down", "x": 10, "y": 10})
        data = client.post("/api/key", json={"key": "Escape"}).get_json()
        assert data["handled"] is True
        assert data["map"]["drawing"]["active"] is False

    def test_wheel_and_view(self, client):
        data = client.post("/api/pointer", json={"type": "wheel", "deltaY": -100}).get_json()
        assert data["map"]["viewport"]["zoom"] == pytest.approx(1.1)
        data = client.post("/api/view", json={"action": "reset"}).get_json()
        assert data["viewport"]["zoom"] == 1.0

    def test_bad_pointer_event(self, client):
        assert client.post("/api/pointer", json={"type": "hover"}).status_code == 400
        assert client.post("/api/pointer", json={"type": "down"}).status_code == 400


class TestRegionsAndRules:
    """Error mapping for store lookups and rule edits."""

    def test_unknown_region(self, client):
        response = client.delete("/api/regions/region_nope")
        assert response.status_code == 404
        assert "error" in response.get_json()

    def test_patch_unknown_data_source(self, client):
        region_id = _draw_region(client)
        response = client.patch(f"/api/regions/{region_id}", json={"dataSourceId": "ozone"})
        assert response.status_code == 404

    def test_patch_region(self, client):
        region_id = _draw_region(client)
        data = client.patch(f"/api/regions/{region_id}", json={"dataSourceId": "humidity"}).get_json()
        assert data["dataSourceId"] == "humidity"

    def test_rule_edits(self, client):
        rule = {"operator": ">=", "value": 40, "color": "#7f1d1d"}
        data = client.post("/api/data-sources/temperature/rules", json=rule).get_json()
        assert len(data["thresholds"]) == 4

        response = client.put("/api/data-sources/temperature/rules/99", json=rule)
        assert response.status_code == 400

        data = client.delete("/api/data-sources/temperature/rules/3").get_json()
        assert len(data["thresholds"]) == 3

    def test_rejected_operator(self, client):
        rule = {"operator": ">", "value": 40, "color": "#7f1d1d"}
        response = client.post("/api/data-sources/temperature/rules", json=rule)
        assert response.status_code == 400

    def test_select_data_source(self, client):
        client.put("/api/data-sources/selected", json={"id": "wind_speed"})
        region_id = _draw_region(client)
        regions = client.get("/api/state").get_json()["regions"]
        assert regions[0]["id"] == region_id
        assert regions[0]["dataSourceId"] == "wind_speed"


class TestTimeAndPlayback:
    """Clock and playback controls."""

    def test_seek_hour(self, client):
        data = client.post("/api/time", json={"hour": 5}).get_json()
        assert data["currentHour"] == 5

    def test_new_range_resets_clock(self, client):
        data = client.post(
            "/api/time", json={"start": "2024-05-01T00:00:00Z", "end": "2024-05-02T00:00:00Z"}
        ).get_json()
        assert data["totalHours"] == 24
        assert data["currentHour"] == 0
        assert data["currentTime"].startswith("2024-05-01T00:00:00")

    def test_inverted_range_rejected(self, client):
        response = client.post(
            "/api/time", json={"start": "2024-05-02T00:00:00Z", "end": "2024-05-01T00:00:00Z"}
        )
        assert response.status_code == 400

    def test_play_disabled_at_end(self, client):
        client.post("/api/playback", json={"action": "skip_end"})
        data = client.post("/api/playback", json={"action": "play"}).get_json()
        assert data["isPlaying"] is False
        assert data["canPlay"] is False

    def test_play_and_pause(self, client):
        assert client.post("/api/playback", json={"action": "play"}).get_json()["isPlaying"]
        assert not client.post("/api/playback", json={"action": "pause"}).get_json()["isPlaying"]

    def test_speed(self, client):
        assert client.post("/api/playback", json={"action": "speed", "speed": 3}).status_code == 400
        data = client.post("/api/playback", json={"action": "speed", "speed": 2}).get_json()
        assert data["speed"] == 2.0


class TestViewsAndExport:
    """Frame, figure, stats, notifications, theme, export."""

    def test_frame(self, client):
        data = client.get("/api/frame").get_json()
        assert data["commands"][0]["kind"] == "clear"
        assert data["commands"][-2]["text"] == "Zoom: 1.0x"
        assert data["renderCount"] == 1
        assert client.get("/api/frame").get_json()["renderCount"] == 1

    def test_figure(self, client):
        response = client.get("/api/figure")
        assert response.status_code == 200
        assert "data" in response.get_json()

    def test_stats_and_notifications(self, client):
        _draw_region(client)
        stats = client.get("/api/stats").get_json()
        assert stats["regionCount"] == 1
        notes = client.get("/api/notifications").get_json()
        assert any(n["title"] == "Region Created" for n in notes)

        dismissed = client.delete(f"/api/notifications/{notes[0]['id']}").get_json()
        assert dismissed["success"] is True

    def test_theme_toggle(self, client):
        assert client.post("/api/theme", json={}).get_json()["darkMode"] is True
        assert client.post("/api/theme", json={"dark": False}).get_json()["darkMode"] is False

    def test_export_download(self, client):
        _draw_region(client)
        response = client.get("/api/export")
        assert response.status_code == 200
        assert "weather-regions-" in response.headers["Content-Disposition"]
        assert len(response.get_json()["polygons"]) == 1

        csv_response = client.get("/api/export?format=csv")
        assert csv_response.mimetype == "text/csv"
        assert client.get("/api/export?format=xml").status_code == 400


class TestRegionReadout:
    """Per-region color and current sample in /api/state."""

    def test_value_follows_hour_seek(self, ramp_client):
        region_id = _draw_region(ramp_client)
        _wait_for_samples(ramp_client, region_id)

        ramp_client.post("/api/time", json={"hour": 5})
        region = ramp_client.get("/api/state").get_json()["regions"][0]
        assert region["currentValue"] == 5.0
        assert region["color"] == "#3b82f6"

        ramp_client.post("/api/time", json={"hour": 12})
        region = ramp_client.get("/api/state").get_json()["regions"][0]
        assert region["currentValue"] == 12.0
        assert region["color"] == "#10b981"

    def test_no_sample_past_series_end(self, ramp_client):
        region_id = _draw_region(ramp_client)
        _wait_for_samples(ramp_client, region_id)

        ramp_client.post("/api/time", json={"hour": 30})
        region = ramp_client.get("/api/state").get_json()["regions"][0]
        assert region["currentValue"] is None
        assert region["color"] == "#ff6b6b"

    def test_drawing_points_reported(self, client):
        client.post("/api/drawing", json={"action": "start"})
        client.post("/api/pointer", json={"type": "down", "x": 10, "y": 20})
        drawing = client.get("/api/state").get_json()["map"]["drawing"]
        assert drawing["active"] is True
        assert drawing["points"] == [[10.0, 20.0]]
        assert drawing["remaining"] == 11


class TestPlaybackBounds:
    """Range-edge flags used to disable the skip buttons."""

    def test_at_start_and_end(self, client):
        data = client.post("/api/playback", json={"action": "skip_start"}).get_json()
        assert data["atStart"] is True
        assert data["atEnd"] is False

        data = client.post("/api/playback", json={"action": "skip_end"}).get_json()
        assert data["atStart"] is False
        assert data["atEnd"] is True


class TestExportToDisk:
    """POST /api/export writes into the configured export directory."""

    def test_json_snapshot(self, export_client, tmp_path):
        data = export_client.post("/api/export").get_json()
        assert data["success"] is True
        assert data["path"].startswith(str(tmp_path))
        assert data["path"].endswith(".json")

    def test_csv_samples(self, export_client, tmp_path):
        region_id = _draw_region(export_client)
        _wait_for_samples(export_client, region_id)

        data = export_client.post("/api/export?format=csv").get_json()
        written = list(tmp_path.glob("weather-samples-*.csv"))
        assert [str(p) for p in written] == [data["path"]]
        assert region_id in written[0].read_text()

    def test_unknown_format(self, export_client):
        assert export_client.post("/api/export?format=xml").status_code == 400
