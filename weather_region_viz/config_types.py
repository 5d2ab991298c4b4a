#!/usr/bin/env python3
"""
Weather Region Map - Configuration Types

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Centralized, typed configuration for the weather region
dashboard using frozen dataclasses for immutability and type safety.

This follows the Typed Configuration Architecture pattern:
- config.py defines CONFIG_DATA dictionary (user edits this)
- config_types.py defines frozen dataclasses (this file)
- APP_CONFIG module-level instance for orchestrator access
- Business logic receives primitives only

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ VIEWPORT CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ViewportConfig:
    """Configuration for the pannable/zoomable map viewport."""

    center_x: float = 0.0
    center_y: float = 0.0
    zoom: float = 1.0
    min_zoom: float = 0.1
    max_zoom: float = 5.0
    wheel_zoom_in_factor: float = 1.1
    wheel_zoom_out_factor: float = 0.9
    button_zoom_factor: float = 1.2
    canvas_width: int = 1200
    canvas_height: int = 800

    def __post_init__(self) -> None:
        """Validate zoom limits."""
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError(
                f"zoom limits must satisfy 0 < min_zoom <= max_zoom, "
                f"got {self.min_zoom}..{self.max_zoom}"
            )
        if self.button_zoom_factor <= 1:
            raise ValueError(
                f"button_zoom_factor must be > 1, got {self.button_zoom_factor}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ViewportConfig":
        """Create from dictionary."""
        center = d.get("center", [0.0, 0.0])
        return cls(
            center_x=float(center[0]),
            center_y=float(center[1]),
            zoom=d.get("zoom", 1.0),
            min_zoom=d.get("min_zoom", 0.1),
            max_zoom=d.get("max_zoom", 5.0),
            wheel_zoom_in_factor=d.get("wheel_zoom_in_factor", 1.1),
            wheel_zoom_out_factor=d.get("wheel_zoom_out_factor", 0.9),
            button_zoom_factor=d.get("button_zoom_factor", 1.2),
            canvas_width=d.get("canvas_width", 1200),
            canvas_height=d.get("canvas_height", 800),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "center": [self.center_x, self.center_y],
            "zoom": self.zoom,
            "min_zoom": self.min_zoom,
            "max_zoom": self.max_zoom,
            "wheel_zoom_in_factor": self.wheel_zoom_in_factor,
            "wheel_zoom_out_factor": self.wheel_zoom_out_factor,
            "button_zoom_factor": self.button_zoom_factor,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
        }


# ═══════════════════════════════════════════════════════════════════════════
# ✏️ DRAWING CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DrawingConfig:
    """Point-count and closure limits for a drawing session."""

    min_points: int = 3
    max_points: int = 12
    closure_threshold_px: float = 15.0

    def __post_init__(self) -> None:
        """Validate point limits."""
        if self.min_points < 3:
            raise ValueError(f"min_points must be >= 3, got {self.min_points}")
        if self.max_points < self.min_points:
            raise ValueError(
                f"max_points must be >= min_points, got {self.max_points}"
            )
        if self.closure_threshold_px <= 0:
            raise ValueError(
                f"closure_threshold_px must be > 0, got {self.closure_threshold_px}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DrawingConfig":
        """Create from dictionary."""
        return cls(
            min_points=d.get("min_points", 3),
            max_points=d.get("max_points", 12),
            closure_threshold_px=d.get("closure_threshold_px", 15.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "min_points": self.min_points,
            "max_points": self.max_points,
            "closure_threshold_px": self.closure_threshold_px,
        }


# ═══════════════════════════════════════════════════════════════════════════
# ⏯️ PLAYBACK CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PlaybackConfig:
    """Timeline playback speeds and default time range."""

    base_interval_s: float = 1.0
    speeds: Tuple[float, ...] = (0.5, 1.0, 2.0, 4.0)
    default_speed: float = 1.0
    default_range_days: int = 15

    def __post_init__(self) -> None:
        """Validate playback settings."""
        if self.base_interval_s <= 0:
            raise ValueError(
                f"base_interval_s must be > 0, got {self.base_interval_s}"
            )
        if self.default_speed not in self.speeds:
            raise ValueError(
                f"default_speed must be one of {self.speeds}, got {self.default_speed}"
            )
        if self.default_range_days <= 0:
            raise ValueError(
                f"default_range_days must be > 0, got {self.default_range_days}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PlaybackConfig":
        """Create from dictionary."""
        return cls(
            base_interval_s=d.get("base_interval_s", 1.0),
            speeds=tuple(d.get("speeds", (0.5, 1.0, 2.0, 4.0))),
            default_speed=d.get("default_speed", 1.0),
            default_range_days=d.get("default_range_days", 15),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "base_interval_s": self.base_interval_s,
            "speeds": list(self.speeds),
            "default_speed": self.default_speed,
            "default_range_days": self.default_range_days,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🔔 NOTIFICATION CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class NotificationConfig:
    """Transient notification limits."""

    max_visible: int = 5
    auto_dismiss_s: float = 5.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NotificationConfig":
        """Create from dictionary."""
        return cls(
            max_visible=d.get("max_visible", 5),
            auto_dismiss_s=d.get("auto_dismiss_s", 5.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "max_visible": self.max_visible,
            "auto_dismiss_s": self.auto_dismiss_s,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 RENDER STYLE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RenderStyleConfig:
    """Colors and sizes used by the render loop."""

    grid_spacing_world: float = 50.0
    light_background: Tuple[str, str] = ("#f0f9ff", "#e0f2fe")
    dark_background: Tuple[str, str] = ("#1f2937", "#111827")
    light_grid_color: str = "#e2e8f0"
    dark_grid_color: str = "#4b5563"
    grid_alpha: float = 0.3
    drawing_color: str = "#3b82f6"
    fill_alpha: float = 0.6
    hover_fill_alpha: float = 0.8
    light_text_color: str = "#374151"
    dark_text_color: str = "#f3f4f6"
    fallback_region_color: str = "#6b7280"

    def __post_init__(self) -> None:
        """Validate grid spacing."""
        if self.grid_spacing_world <= 0:
            raise ValueError(
                f"grid_spacing_world must be > 0, got {self.grid_spacing_world}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RenderStyleConfig":
        """Create from dictionary."""
        return cls(
            grid_spacing_world=d.get("grid_spacing_world", 50.0),
            light_background=tuple(d.get("light_background", ("#f0f9ff", "#e0f2fe"))),
            dark_background=tuple(d.get("dark_background", ("#1f2937", "#111827"))),
            light_grid_color=d.get("light_grid_color", "#e2e8f0"),
            dark_grid_color=d.get("dark_grid_color", "#4b5563"),
            grid_alpha=d.get("grid_alpha", 0.3),
            drawing_color=d.get("drawing_color", "#3b82f6"),
            fill_alpha=d.get("fill_alpha", 0.6),
            hover_fill_alpha=d.get("hover_fill_alpha", 0.8),
            light_text_color=d.get("light_text_color", "#374151"),
            dark_text_color=d.get("dark_text_color", "#f3f4f6"),
            fallback_region_color=d.get("fallback_region_color", "#6b7280"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "grid_spacing_world": self.grid_spacing_world,
            "light_background": list(self.light_background),
            "dark_background": list(self.dark_background),
            "light_grid_color": self.light_grid_color,
            "dark_grid_color": self.dark_grid_color,
            "grid_alpha": self.grid_alpha,
            "drawing_color": self.drawing_color,
            "fill_alpha": self.fill_alpha,
            "hover_fill_alpha": self.hover_fill_alpha,
            "light_text_color": self.light_text_color,
            "dark_text_color": self.dark_text_color,
            "fallback_region_color": self.fallback_region_color,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 🌡️ WEATHER SOURCE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class WeatherSourceConfig:
    """Synthetic weather generator settings."""

    latency_s: float = 0.5
    failure_rate: float = 0.0
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate generator settings."""
        if self.latency_s < 0:
            raise ValueError(f"latency_s must be >= 0, got {self.latency_s}")
        if not 0 <= self.failure_rate <= 1:
            raise ValueError(
                f"failure_rate must be in [0, 1], got {self.failure_rate}"
            )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WeatherSourceConfig":
        """Create from dictionary."""
        return cls(
            latency_s=d.get("latency_s", 0.5),
            failure_rate=d.get("failure_rate", 0.0),
            seed=d.get("seed"),
        )


# ═══════════════════════════════════════════════════════════════════════════
# 🌐 SERVER CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ServerConfig:
    """Local Flask server settings."""

    host: str = "127.0.0.1"
    port: int = 5051
    command_timeout_s: float = 10.0
    export_dir: str = "Output"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ServerConfig":
        """Create from dictionary."""
        return cls(
            host=d.get("host", "127.0.0.1"),
            port=d.get("port", 5051),
            command_timeout_s=d.get("command_timeout_s", 10.0),
            export_dir=d.get("export_dir", "Output"),
        )


# ═══════════════════════════════════════════════════════════════════════════
# 📦 MAIN APP CONFIGURATION CLASS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AppConfig:
    """
    Main configuration class for the weather region dashboard.

    Access via the module-level APP_CONFIG instance.
    Data source definitions stay as raw dicts here; the store turns them
    into DataSeriesDefinition objects.
    """

    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    drawing: DrawingConfig = field(default_factory=DrawingConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    render: RenderStyleConfig = field(default_factory=RenderStyleConfig)
    weather_source: WeatherSourceConfig = field(default_factory=WeatherSourceConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    data_sources: Tuple[Dict[str, Any], ...] = ()
    default_data_source: str = "temperature"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        """Create from dictionary."""
        return cls(
            viewport=ViewportConfig.from_dict(d.get("viewport", {})),
            drawing=DrawingConfig.from_dict(d.get("drawing", {})),
            playback=PlaybackConfig.from_dict(d.get("playback", {})),
            notifications=NotificationConfig.from_dict(d.get("notifications", {})),
            render=RenderStyleConfig.from_dict(d.get("render", {})),
            weather_source=WeatherSourceConfig.from_dict(
                d.get("weather_source", {})
            ),
            server=ServerConfig.from_dict(d.get("server", {})),
            data_sources=tuple(d.get("data_sources", [])),
            default_data_source=d.get("default_data_source", "temperature"),
        )

    @classmethod
    def defaults(cls) -> "AppConfig":
        """Create with all default values (and the shipped data sources)."""
        return cls.from_dict(CONFIG_DATA)

    def to_frontend_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for frontend JSON API."""
        return {
            "viewport": self.viewport.to_dict(),
            "drawing": self.drawing.to_dict(),
            "playback": self.playback.to_dict(),
            "notifications": self.notifications.to_dict(),
            "render": self.render.to_dict(),
            "dataSources": list(self.data_sources),
            "defaultDataSource": self.default_data_source,
        }


# ═══════════════════════════════════════════════════════════════════════════
# 📌 MODULE-LEVEL CONFIG INSTANCE
# ═══════════════════════════════════════════════════════════════════════════

# Import configuration data from separate file (user-editable)
from weather_region_viz.config import CONFIG_DATA

# Create typed config from data dictionary
# Edit config.py to change settings (restart server after changes)
APP_CONFIG: AppConfig = AppConfig.defaults()


def get_frontend_config() -> Dict[str, Any]:
    """
    Get configuration for frontend JavaScript.

    Returns a dict suitable for JSON serialization and use in the frontend.
    """
    return APP_CONFIG.to_frontend_dict()
