#!/usr/bin/env python3
"""
Weather Region Map - Flask Server

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Lightweight Flask server for the interactive weather region
map. The browser page forwards raw canvas events here and paints the display
list it gets back; every command is executed on the DashboardRuntime loop.

Key Interactions:
- DashboardRuntime owns store, map view, render loop and playback timer
- runtime.call() hands each request's work to the loop thread and waits
- WeatherRegionError subclasses map to 400 / 404 JSON responses

Navigation Guide:
- ROUTES: page, config, state, frame/figure, input events, regions,
  data-source rules, time/playback, stats, notifications, theme, export
- STARTUP: runtime initialization, logging setup, main()

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import io
import logging
import sys
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, render_template, request
from flask_cors import CORS

from weather_region_viz.config_types import APP_CONFIG, AppConfig, get_frontend_config
from weather_region_viz.errors import (
    UnknownDataSource,
    UnknownRegion,
    WeatherRegionError,
)
from weather_region_viz.exporters import (
    export_samples_csv,
    export_snapshot_file,
    export_snapshot_json,
    samples_dataframe,
    samples_filename,
    snapshot_filename,
)
from weather_region_viz.models.data_models import (
    ClassificationRule,
    Point,
    TimeRange,
    parse_instant,
    rule_from_dict,
)
from weather_region_viz.runtime import DashboardRuntime
from weather_region_viz.stats import compute_live_stats
from weather_region_viz.visualization.plotly_frame import build_frame_figure

# ═══════════════════════════════════════════════════════════════════════════
# 🌐 FLASK APPLICATION
# ═══════════════════════════════════════════════════════════════════════════

app = Flask(__name__, template_folder="templates")
CORS(app)

# Global runtime - initialized on startup
runtime: Optional[DashboardRuntime] = None

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Console logging for the server process."""
    root = logging.getLogger()
    if any(getattr(h, "_weather_region_viz", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    handler._weather_region_viz = True
    root.addHandler(handler)
    root.setLevel(level)


# ═══════════════════════════════════════════════════════════════════════════
# 🔧 REQUEST HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _runtime() -> DashboardRuntime:
    if runtime is None or not runtime.running:
        raise RuntimeError("Server not initialized")
    return runtime


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _require(data: Dict[str, Any], *fields: str) -> None:
    for field in fields:
        if field not in data:
            raise ValueError(f"Missing {field} in request body")


def _parse_rule(data: Dict[str, Any]) -> ClassificationRule:
    try:
        return rule_from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid threshold rule: {e}") from e


def _point(data: Dict[str, Any]) -> Point:
    _require(data, "x", "y")
    return Point(float(data["x"]), float(data["y"]))


# ═══════════════════════════════════════════════════════════════════════════
# ⚠️ ERROR HANDLERS
# ═══════════════════════════════════════════════════════════════════════════


@app.errorhandler(UnknownRegion)
@app.errorhandler(UnknownDataSource)
def handle_not_found(error: WeatherRegionError):
    return jsonify({"error": f"Not found: {error.args[0] if error.args else error}"}), 404


@app.errorhandler(WeatherRegionError)
@app.errorhandler(ValueError)
@app.errorhandler(IndexError)
def handle_bad_request(error: Exception):
    return jsonify({"error": str(error)}), 400


@app.errorhandler(RuntimeError)
def handle_not_ready(error: RuntimeError):
    logger.error(f"❌ {error}")
    return jsonify({"error": str(error)}), 500


# ═══════════════════════════════════════════════════════════════════════════
# 🛣️ PAGE AND STATE ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/")
def index() -> str:
    """Serve the main map interface."""
    return render_template("index.html")


@app.route("/api/config")
def get_config() -> Response:
    """Frontend configuration settings."""
    return jsonify(get_frontend_config())


@app.route("/api/state")
def get_state() -> Response:
    """Regions, data sources, playback, map interaction state and theme."""
    rt = _runtime()
    return jsonify(rt.call(rt.state_dict))


@app.route("/api/frame")
def get_frame() -> Response:
    """
    Current display list.

    Returns:
        {"width", "height", "commands": [...], "renderCount": int}
    """
    rt = _runtime()

    def build() -> Dict[str, Any]:
        frame = rt.frame()
        return {**frame.to_dict(), "renderCount": rt.render_loop.render_count}

    return jsonify(rt.call(build))


@app.route("/api/figure")
def get_figure() -> Response:
    """Current frame as a plotly figure JSON."""
    rt = _runtime()
    frame = rt.call(rt.frame)
    return Response(build_frame_figure(frame).to_json(), mimetype="application/json")


# ═══════════════════════════════════════════════════════════════════════════
# 🖱️ INPUT EVENT ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/pointer", methods=["POST"])
def post_pointer() -> Response:
    """
    Forward a canvas pointer event.

    Request Body:
        {"type": "down" | "move" | "up" | "wheel" | "dblclick",
         "x": float, "y": float,   # down/move
         "deltaY": float}          # wheel

    Returns:
        {"hitRegionId": str | null,        # idle click landed on a region
         "completedRegionId": str | null,  # click/dblclick closed a polygon
         "map": {...}}

    An idle click on a region is never deleted here: the page asks the user
    and sends DELETE /api/regions/<id> when confirmed.
    """
    rt = _runtime()
    data = _payload()
    _require(data, "type")
    event = data["type"]
    view = rt.map_view

    def handle() -> Dict[str, Any]:
        hit_id = completed_id = None
        if event == "down":
            was_drawing = view.drawing.is_drawing
            region = view.on_pointer_down(_point(data))
            if region is not None:
                if was_drawing:
                    completed_id = region.id
                else:
                    hit_id = region.id
        elif event == "move":
            view.on_pointer_move(_point(data))
        elif event == "up":
            view.on_pointer_up()
        elif event == "wheel":
            view.on_wheel(float(data.get("deltaY", 0)))
        elif event == "dblclick":
            region = view.on_double_click()
            completed_id = region.id if region else None
        else:
            raise ValueError(f"Unknown pointer event type: {event!r}")
        return {
            "hitRegionId": hit_id,
            "completedRegionId": completed_id,
            "map": view.to_dict(),
        }

    return jsonify(rt.call(handle))


@app.route("/api/key", methods=["POST"])
def post_key() -> Response:
    """Forward a key press: {"key": "Escape"}."""
    rt = _runtime()
    data = _payload()
    _require(data, "key")
    handled = rt.call(rt.map_view.on_key, str(data["key"]))
    return jsonify({"handled": handled, "map": rt.call(rt.map_view.to_dict)})


@app.route("/api/view", methods=["POST"])
def post_view() -> Response:
    """
    Viewport controls.

    Request Body:
        {"action": "zoom_in" | "zoom_out" | "reset" | "resize",
         "width": float, "height": float}   # resize
    """
    rt = _runtime()
    data = _payload()
    _require(data, "action")
    action = data["action"]
    view = rt.map_view

    def handle() -> Dict[str, Any]:
        if action == "zoom_in":
            view.zoom_in()
        elif action == "zoom_out":
            view.zoom_out()
        elif action == "reset":
            view.reset_view()
        elif action == "resize":
            _require(data, "width", "height")
            view.resize(float(data["width"]), float(data["height"]))
        else:
            raise ValueError(f"Unknown view action: {action!r}")
        return view.to_dict()

    return jsonify(rt.call(handle))


@app.route("/api/drawing", methods=["POST"])
def post_drawing() -> Response:
    """Drawing controls: {"action": "start" | "toggle" | "complete" | "cancel"}."""
    rt = _runtime()
    data = _payload()
    _require(data, "action")
    action = data["action"]
    view = rt.map_view

    def handle() -> Dict[str, Any]:
        completed = None
        if action == "start":
            view.start_drawing()
        elif action == "toggle":
            view.toggle_drawing()
        elif action == "complete":
            completed = view.complete_drawing()
        elif action == "cancel":
            view.cancel_drawing()
        else:
            raise ValueError(f"Unknown drawing action: {action!r}")
        return {
            "completedRegionId": completed.id if completed else None,
            "map": view.to_dict(),
        }

    return jsonify(rt.call(handle))


# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ REGION AND DATA-SOURCE ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/regions/<region_id>", methods=["DELETE"])
def delete_region(region_id: str) -> Response:
    rt = _runtime()
    region = rt.call(rt.store.delete_region, region_id)
    return jsonify({"success": True, "deleted_id": region.id})


@app.route("/api/regions/<region_id>", methods=["PATCH"])
def patch_region(region_id: str) -> Response:
    """Rebind a region: {"dataSourceId": str}."""
    rt = _runtime()
    data = _payload()
    _require(data, "dataSourceId")
    region = rt.call(rt.store.assign_data_source, region_id, str(data["dataSourceId"]))
    return jsonify(region.to_dict())


@app.route("/api/data-sources/selected", methods=["PUT"])
def put_selected_data_source() -> Response:
    """Data source bound to newly drawn regions: {"id": str}."""
    rt = _runtime()
    data = _payload()
    _require(data, "id")
    rt.call(rt.store.select_data_source, str(data["id"]))
    return jsonify({"selectedDataSourceId": data["id"]})


@app.route("/api/data-sources/<source_id>/rules", methods=["POST"])
def add_rule(source_id: str) -> Response:
    """Append a threshold rule (threshold dict format)."""
    rt = _runtime()
    rule = _parse_rule(_payload())
    definition = rt.call(rt.store.add_rule, source_id, rule)
    return jsonify(definition.to_dict())


@app.route("/api/data-sources/<source_id>/rules/<int:index>", methods=["PUT"])
def update_rule(source_id: str, index: int) -> Response:
    rt = _runtime()
    rule = _parse_rule(_payload())
    definition = rt.call(rt.store.update_rule, source_id, index, rule)
    return jsonify(definition.to_dict())


@app.route("/api/data-sources/<source_id>/rules/<int:index>", methods=["DELETE"])
def remove_rule(source_id: str, index: int) -> Response:
    rt = _runtime()
    definition = rt.call(rt.store.remove_rule, source_id, index)
    return jsonify(definition.to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# ⏱️ TIME AND PLAYBACK ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/time", methods=["POST"])
def post_time() -> Response:
    """
    Change the time range or the clock.

    Request Body (one of):
        {"start": iso, "end": iso}   # new range; clock jumps to its start
        {"currentTime": iso}
        {"hour": int}                # seek by hour index (slider)
    """
    rt = _runtime()
    data = _payload()

    def handle() -> Dict[str, Any]:
        if "start" in data or "end" in data:
            _require(data, "start", "end")
            rt.pause()
            rt.store.set_time_range(TimeRange.from_dict(data))
        elif "currentTime" in data:
            rt.store.set_current_time(parse_instant(data["currentTime"]))
        elif "hour" in data:
            timeline = rt.timeline()
            rt.store.set_current_time(timeline.seek_hour(int(data["hour"])))
        else:
            raise ValueError("Expected start/end, currentTime or hour in request body")
        return rt.playback_dict()

    return jsonify(rt.call(handle))


@app.route("/api/playback", methods=["GET", "POST"])
def playback() -> Response:
    """
    Playback state and controls.

    Request Body (POST):
        {"action": "play" | "pause" | "toggle" | "skip_start" | "skip_end"
                   | "speed",
         "speed": float}   # speed
    """
    rt = _runtime()
    if request.method == "GET":
        return jsonify(rt.call(rt.playback_dict))

    data = _payload()
    _require(data, "action")
    action = data["action"]

    def handle() -> Dict[str, Any]:
        if action == "play":
            rt.play()
        elif action == "pause":
            rt.pause()
        elif action == "toggle":
            if rt.playback.running:
                rt.pause()
            else:
                rt.play()
        elif action == "skip_start":
            rt.store.set_current_time(rt.timeline().skip_to_start())
        elif action == "skip_end":
            rt.pause()
            rt.store.set_current_time(rt.timeline().skip_to_end())
        elif action == "speed":
            _require(data, "speed")
            rt.playback.set_speed(float(data["speed"]))
        else:
            raise ValueError(f"Unknown playback action: {action!r}")
        return rt.playback_dict()

    return jsonify(rt.call(handle))


# ═══════════════════════════════════════════════════════════════════════════
# 📊 STATS, NOTIFICATIONS, THEME
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/stats")
def get_stats() -> Response:
    rt = _runtime()
    return jsonify(rt.call(compute_live_stats, rt.store))


@app.route("/api/notifications")
def get_notifications() -> Response:
    """Visible notifications, newest first (expired ones are pruned)."""
    rt = _runtime()
    items = rt.call(rt.store.notifications.visible)
    return jsonify([n.to_dict() for n in items])


@app.route("/api/notifications/<notification_id>", methods=["DELETE"])
def dismiss_notification(notification_id: str) -> Response:
    rt = _runtime()
    dismissed = rt.call(rt.store.notifications.dismiss, notification_id)
    return jsonify({"success": dismissed})


@app.route("/api/theme", methods=["POST"])
def post_theme() -> Response:
    """Set or toggle dark mode: {"dark": bool} (omit to toggle)."""
    rt = _runtime()
    data = _payload()

    def handle() -> bool:
        store = rt.store
        store.dark_mode = bool(data["dark"]) if "dark" in data else not store.dark_mode
        return store.dark_mode

    return jsonify({"darkMode": rt.call(handle)})


# ═══════════════════════════════════════════════════════════════════════════
# 💾 EXPORT ROUTES
# ═══════════════════════════════════════════════════════════════════════════


@app.route("/api/export", methods=["GET"])
def export_download() -> Response:
    """
    Download the dashboard snapshot.

    Query Parameters:
        format: "json" (default) or "csv" (cached samples table)
    """
    rt = _runtime()
    fmt = request.args.get("format", "json")

    if fmt == "csv":
        df = rt.call(samples_dataframe, rt.store)
        output = io.StringIO()
        df.to_csv(output, index=False)
        return Response(
            output.getvalue(),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={samples_filename()}"},
        )
    if fmt != "json":
        raise ValueError(f"Unsupported export format: {fmt!r}")

    def build() -> str:
        body = export_snapshot_json(rt.store)
        rt.store.notifications.success("Data Exported", "Project data exported successfully")
        return body

    return Response(
        rt.call(build),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={snapshot_filename()}"},
    )


@app.route("/api/export", methods=["POST"])
def export_to_disk() -> Response:
    """
    Write an export into the configured export directory.

    Query Parameters:
        format: "json" (default snapshot) or "csv" (cached samples table)
    """
    rt = _runtime()
    fmt = request.args.get("format", "json")
    if fmt == "csv":
        writer = export_samples_csv
    elif fmt == "json":
        writer = export_snapshot_file
    else:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    path = rt.call(writer, rt.store, rt.config.server.export_dir)
    return jsonify({"success": True, "path": str(path)})


# ═══════════════════════════════════════════════════════════════════════════
# 🚀 SERVER INITIALIZATION
# ═══════════════════════════════════════════════════════════════════════════


def initialize_services(
    config: AppConfig = APP_CONFIG,
    dashboard: Optional[DashboardRuntime] = None,
) -> DashboardRuntime:
    """
    Start the dashboard runtime and bind it to the Flask app.

    Args:
        config: Application configuration
        dashboard: Pre-built runtime (tests inject one with a fake fetcher)

    Returns:
        The running runtime
    """
    global runtime

    shutdown_services()
    runtime = (dashboard or DashboardRuntime(config)).start()
    logger.info(f"✅ Runtime ready with {len(runtime.store.data_sources)} data sources")
    return runtime


def shutdown_services() -> None:
    global runtime

    if runtime is not None:
        runtime.stop()
        runtime = None


def main() -> None:
    """Main entry point - initialize and start server."""
    setup_logging()
    server = APP_CONFIG.server

    initialize_services(APP_CONFIG)

    logger.info(f"🌐 Starting server at http://{server.host}:{server.port}")
    logger.info(f"   Open browser to: http://{server.host}:{server.port}")

    try:
        # Reloader would start a second runtime thread
        app.run(host=server.host, port=server.port, debug=False, threaded=True)
    finally:
        shutdown_services()


if __name__ == "__main__":
    main()
