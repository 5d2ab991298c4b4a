#!/usr/bin/env python3
"""
Weather Region Map - Configuration

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Configuration dictionary for the weather region dashboard.
This is the user-facing configuration file - edit values here.

Pattern:
- config.py defines the CONFIG_DATA dictionary (edit this)
- config_types.py defines typed dataclasses and loads from CONFIG_DATA

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from typing import Dict, Any

# ═══════════════════════════════════════════════════════════════════════════
# 🌦️ WEATHER REGION DASHBOARD CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════

CONFIG_DATA: Dict[str, Any] = {
    # ═══════════════════════════════════════════════════════════════════════
    # 🗺️ VIEWPORT SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "viewport": {
        "center": [0.0, 0.0],  # World-space center on load / reset
        "zoom": 1.0,
        "min_zoom": 0.1,
        "max_zoom": 5.0,
        "wheel_zoom_in_factor": 1.1,  # Wheel scrolled up
        "wheel_zoom_out_factor": 0.9,  # Wheel scrolled down
        "button_zoom_factor": 1.2,  # Zoom in/out buttons
        "canvas_width": 1200,  # Initial canvas size until the browser reports one
        "canvas_height": 800,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # ✏️ DRAWING SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "drawing": {
        "min_points": 3,
        "max_points": 12,
        "closure_threshold_px": 15.0,  # Click this close to the first point to close
    },
    # ═══════════════════════════════════════════════════════════════════════
    # ⏯️ PLAYBACK SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "playback": {
        "base_interval_s": 1.0,  # One simulated hour per second at 1x
        "speeds": [0.5, 1.0, 2.0, 4.0],
        "default_speed": 1.0,
        "default_range_days": 15,  # Range is now +/- this many days
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🔔 NOTIFICATION SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "notifications": {
        "max_visible": 5,
        "auto_dismiss_s": 5.0,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🎨 RENDER STYLE
    # ═══════════════════════════════════════════════════════════════════════
    "render": {
        "grid_spacing_world": 50.0,  # Grid spacing in world units (scaled by zoom)
        "light_background": ["#f0f9ff", "#e0f2fe"],
        "dark_background": ["#1f2937", "#111827"],
        "light_grid_color": "#e2e8f0",
        "dark_grid_color": "#4b5563",
        "grid_alpha": 0.3,
        "drawing_color": "#3b82f6",
        "fill_alpha": 0.6,
        "hover_fill_alpha": 0.8,
        "light_text_color": "#374151",
        "dark_text_color": "#f3f4f6",
        "fallback_region_color": "#6b7280",  # Region bound to an unknown data source
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🌡️ SYNTHETIC WEATHER SOURCE
    # ═══════════════════════════════════════════════════════════════════════
    "weather_source": {
        "latency_s": 0.5,
        "failure_rate": 0.0,  # Probability a fetch raises DataFetchFailure
        "seed": None,  # Fixed seed gives repeatable series
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📊 DATA SOURCES (classification rules use the threshold dict format)
    # ═══════════════════════════════════════════════════════════════════════
    "default_data_source": "temperature",
    "data_sources": [
        {
            "id": "temperature",
            "name": "Temperature",
            "field": "temperature_2m",
            "color": "#ff6b6b",
            "unit": "°C",
            "thresholds": [
                {"operator": "<", "value": 10, "color": "#3b82f6"},
                {"operator": ">=", "value": 10, "operator2": "<", "value2": 25, "color": "#10b981"},
                {"operator": ">=", "value": 25, "color": "#ef4444"},
            ],
        },
        {
            "id": "humidity",
            "name": "Humidity",
            "field": "relative_humidity_2m",
            "color": "#06b6d4",
            "unit": "%",
            "thresholds": [
                {"operator": "<", "value": 40, "color": "#f59e0b"},
                {"operator": ">=", "value": 40, "operator2": "<", "value2": 70, "color": "#10b981"},
                {"operator": ">=", "value": 70, "color": "#3b82f6"},
            ],
        },
        {
            "id": "precipitation",
            "name": "Precipitation",
            "field": "precipitation",
            "color": "#8b5cf6",
            "unit": "mm",
            "thresholds": [
                {"operator": "<", "value": 0.1, "color": "#f3f4f6"},
                {"operator": ">=", "value": 0.1, "operator2": "<", "value2": 2, "color": "#60a5fa"},
                {"operator": ">=", "value": 2, "color": "#1d4ed8"},
            ],
        },
        {
            "id": "wind_speed",
            "name": "Wind Speed",
            "field": "wind_speed_10m",
            "color": "#f59e0b",
            "unit": "km/h",
            "thresholds": [
                {"operator": "<", "value": 5, "color": "#10b981"},
                {"operator": ">=", "value": 5, "operator2": "<", "value2": 15, "color": "#f59e0b"},
                {"operator": ">=", "value": 15, "color": "#ef4444"},
            ],
        },
    ],
    # ═══════════════════════════════════════════════════════════════════════
    # 🌐 SERVER SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "server": {
        "host": "127.0.0.1",
        "port": 5051,
        "command_timeout_s": 10.0,
        "export_dir": "Output",
    },
}
