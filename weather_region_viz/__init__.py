"""
Weather Region Map

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Interactive map on which users draw polygonal regions, bind
each to a weather data series, and replay an hourly timeline while regions
are re-colored by threshold rules.

Key Features:
- Pan/zoom canvas with a screen <-> world transform
- Polygon drawing state machine (3..12 vertices, click-near-first closes)
- Ordered threshold classification of hourly samples
- Playback timer on a single asyncio loop, async weather fetches
- Flask JSON API plus a canvas page that replays display lists

Usage:
    from weather_region_viz.runtime import DashboardRuntime

    with DashboardRuntime() as runtime:
        runtime.call(runtime.map_view.start_drawing)

    # or run the server
    python -m weather_region_viz.server

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

__version__ = "1.0.0"
