"""
Typed data models for the weather region dashboard.

Architectural Overview:
=======================
Immutable dataclasses for everything the map view, the classification engine
and the store pass between each other. Dict payloads (config, weather
responses, export snapshots) are converted at the boundary through
from_dict() / from_payload() and never travel further in raw form.

Key Interactions:
-----------------
- Input: config.py data-source dicts, weather collaborator payloads
- Output: to_dict() methods feed the export snapshot and the JSON API
- Navigation: Use VS Code outline (Ctrl+Shift+O) for quick navigation

Coordinate Spaces:
------------------
Point is used for both screen pixels (origin top-left, y-down) and world
coordinates (flat, unbounded plane). The space is implied by the code path:
DrawingSession.points are screen points, Region.vertices are world points.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from weather_region_viz.color_utils import is_hex_color
from weather_region_viz.errors import DataFetchFailure

HOUR = timedelta(hours=1)


# ═══════════════════════════════════════════════════════════════════════════
# 📍 POINTS, CANVAS, VIEWPORT
# ═══════════════════════════════════════════════════════════════════════════


class Point(NamedTuple):
    """A pair of real-valued coordinates (screen or world space)."""

    x: float
    y: float

    def to_list(self) -> List[float]:
        return [self.x, self.y]


class CanvasSize(NamedTuple):
    """Pixel size of the rendering surface."""

    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)


MIN_ZOOM = 0.1
MAX_ZOOM = 5.0


@dataclass(frozen=True)
class Viewport:
    """World-space center plus zoom factor.

    zoom is always clamped to [min_zoom, max_zoom]; use the constructors
    below rather than building one with an arbitrary zoom.
    """

    center: Point = Point(0.0, 0.0)
    zoom: float = 1.0
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", Point(*self.center))
        object.__setattr__(
            self, "zoom", min(self.max_zoom, max(self.min_zoom, float(self.zoom)))
        )

    @classmethod
    def default(cls) -> "Viewport":
        return cls()

    def zoomed_by(self, factor: float) -> "Viewport":
        """Zoom about the canvas center (the viewport center is unchanged)."""
        return replace(self, zoom=self.zoom * factor)

    def panned_by(self, screen_dx: float, screen_dy: float) -> "Viewport":
        """Drag the map by a screen-space delta."""
        return replace(
            self,
            center=Point(
                self.center.x - screen_dx / self.zoom,
                self.center.y - screen_dy / self.zoom,
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"center": self.center.to_list(), "zoom": self.zoom}


# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ REGION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Region:
    """A user-drawn polygon bound to a data source.

    Shape is immutable after creation: centroid is computed once by the
    drawing state machine. Only data_source_id may be reassigned, which
    produces a new Region via with_data_source().
    """

    id: str
    vertices: Tuple[Point, ...]
    centroid: Point
    data_source_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(Point(*v) for v in self.vertices))
        object.__setattr__(self, "centroid", Point(*self.centroid))

    @property
    def label(self) -> str:
        """Short display label, e.g. "Region 1a2b3c4d"."""
        suffix = self.id.split("_", 1)[1] if "_" in self.id else self.id
        return f"Region {suffix}"

    def with_data_source(self, data_source_id: str) -> "Region":
        return replace(self, data_source_id=data_source_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "coordinates": [v.to_list() for v in self.vertices],
            "center": self.centroid.to_list(),
            "dataSourceId": self.data_source_id,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Region":
        return cls(
            id=d["id"],
            vertices=tuple(Point(*c) for c in d["coordinates"]),
            centroid=Point(*d["center"]),
            data_source_id=d["dataSourceId"],
        )


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 CLASSIFICATION RULES
# ═══════════════════════════════════════════════════════════════════════════


def _check_color(color: str) -> None:
    if not is_hex_color(color):
        raise ValueError(f"color must be a '#RRGGBB' string, got {color!r}")


@dataclass(frozen=True)
class LessThan:
    """Matches samples strictly below threshold.

    color must be a "#RRGGBB" hex string; CSS names such as "blue" raise
    ValueError.
    """

    threshold: float
    color: str

    def __post_init__(self) -> None:
        _check_color(self.color)

    def matches(self, value: float) -> bool:
        return value < self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return {"operator": "<", "value": self.threshold, "color": self.color}


@dataclass(frozen=True)
class AtLeast:
    """Matches samples at or above threshold (no upper bound); color is "#RRGGBB"."""

    threshold: float
    color: str

    def __post_init__(self) -> None:
        _check_color(self.color)

    def matches(self, value: float) -> bool:
        return value >= self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return {"operator": ">=", "value": self.threshold, "color": self.color}


@dataclass(frozen=True)
class Range:
    """Matches low_inclusive <= sample < high_exclusive; color is "#RRGGBB"."""

    low_inclusive: float
    high_exclusive: float
    color: str

    def __post_init__(self) -> None:
        _check_color(self.color)

    def matches(self, value: float) -> bool:
        return self.low_inclusive <= value < self.high_exclusive

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operator": ">=",
            "value": self.low_inclusive,
            "operator2": "<",
            "value2": self.high_exclusive,
            "color": self.color,
        }


ClassificationRule = Union[LessThan, AtLeast, Range]


def rule_from_dict(d: Dict[str, Any]) -> ClassificationRule:
    """
    Parse a threshold dict into a classification rule.

    Accepted shapes:
        {"operator": "<",  "value": t, "color": c}                 -> LessThan
        {"operator": ">=", "value": t, "color": c}                 -> AtLeast
        {"operator": ">=", "value": lo, "value2": hi, "color": c}  -> Range

    Raises:
        ValueError: unknown operator, or an upper bound with an operator2
            other than "<"
    """
    operator = d.get("operator")
    color = d.get("color")
    value = float(d["value"])

    if operator == "<":
        return LessThan(threshold=value, color=color)
    if operator == ">=":
        if d.get("value2") is None:
            return AtLeast(threshold=value, color=color)
        operator2 = d.get("operator2", "<")
        if operator2 != "<":
            raise ValueError(f"Range upper bound must use '<', got {operator2!r}")
        return Range(low_inclusive=value, high_exclusive=float(d["value2"]), color=color)

    raise ValueError(f"Unsupported threshold operator: {operator!r}")


# ═══════════════════════════════════════════════════════════════════════════
# 📊 DATA SERIES DEFINITION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DataSeriesDefinition:
    """Named weather parameter plus its ordered color-classification rules.

    Rules are evaluated in declaration order, first match wins. Editing
    rules yields a new definition (with_rules); regions only hold the id,
    so edits affect future renders only.
    """

    id: str
    display_name: str
    sample_field_key: str
    base_color: str
    rules: Tuple[ClassificationRule, ...] = ()
    unit: str = ""

    def __post_init__(self) -> None:
        _check_color(self.base_color)
        object.__setattr__(self, "rules", tuple(self.rules))

    def with_rules(self, rules: Sequence[ClassificationRule]) -> "DataSeriesDefinition":
        return replace(self, rules=tuple(rules))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "field": self.sample_field_key,
            "color": self.base_color,
            "unit": self.unit,
            "thresholds": [rule.to_dict() for rule in self.rules],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DataSeriesDefinition":
        return cls(
            id=d["id"],
            display_name=d.get("name", d["id"]),
            sample_field_key=d["field"],
            base_color=d["color"],
            rules=tuple(rule_from_dict(t) for t in d.get("thresholds", [])),
            unit=d.get("unit", ""),
        )


# ═══════════════════════════════════════════════════════════════════════════
# ⏱️ TIME RANGE
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class TimeRange:
    """Active simulated time range [start, end]."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"time range end must be after start, got {self.start} .. {self.end}"
            )

    @classmethod
    def default_around(cls, now: datetime, days: int = 15) -> "TimeRange":
        """Range spanning `days` days either side of `now`, on whole hours."""
        anchor = now.replace(minute=0, second=0, microsecond=0)
        return cls(start=anchor - timedelta(days=days), end=anchor + timedelta(days=days))

    @property
    def total_hours(self) -> int:
        return int((self.end - self.start) // HOUR)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}

    @classmethod
    def from_dict(cls, d: Dict[str, str]) -> "TimeRange":
        return cls(start=parse_instant(d["start"]), end=parse_instant(d["end"]))


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.to_pydatetime()


# ═══════════════════════════════════════════════════════════════════════════
# 🌡️ SAMPLE SERIES
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SampleSeries:
    """Time-aligned numeric samples for one region.

    fields[key][i] is the sample taken at timestamps[i]. Missing samples
    are stored as None.
    """

    timestamps: Tuple[datetime, ...]
    fields: Dict[str, Tuple[Optional[float], ...]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "SampleSeries":
        """
        Validate and ingest a weather payload.

        Expected shape:
            {"hourly": {"time": [iso, ...], "<field>": [number, ...], ...}}

        Raises:
            DataFetchFailure: payload missing "hourly"/"time", timestamps not
                strictly increasing, or a field array not aligned with time
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("hourly"), dict):
            raise DataFetchFailure("Weather payload has no 'hourly' section")
        hourly = payload["hourly"]
        if "time" not in hourly:
            raise DataFetchFailure("Weather payload has no 'time' array")

        try:
            index = pd.to_datetime(list(hourly["time"]), utc=True)
        except (TypeError, ValueError) as e:
            raise DataFetchFailure(f"Unparseable timestamps in weather payload: {e}") from e

        if not (index.is_monotonic_increasing and index.is_unique):
            raise DataFetchFailure("Weather payload timestamps are not strictly increasing")

        fields: Dict[str, Tuple[Optional[float], ...]] = {}
        for key, values in hourly.items():
            if key == "time":
                continue
            values = list(values)
            if len(values) != len(index):
                raise DataFetchFailure(
                    f"Field '{key}' has {len(values)} samples for {len(index)} timestamps"
                )
            numeric = pd.to_numeric(pd.Series(values, dtype="object"), errors="coerce")
            fields[key] = tuple(None if pd.isna(v) else float(v) for v in numeric)

        return cls(timestamps=tuple(index.to_pydatetime()), fields=fields)

    def __len__(self) -> int:
        return len(self.timestamps)

    def has_field(self, key: str) -> bool:
        return key in self.fields

    def sample(self, key: str, index: int) -> Optional[float]:
        """Sample at `index`, or None when the field/index/value is missing."""
        values = self.fields.get(key)
        if values is None or index < 0 or index >= len(values):
            return None
        value = values[index]
        if value is None or math.isnan(value):
            return None
        return value

    def to_payload(self) -> Dict[str, Any]:
        hourly: Dict[str, Any] = {"time": [t.isoformat() for t in self.timestamps]}
        for key, values in self.fields.items():
            hourly[key] = list(values)
        return {"hourly": hourly}

    def to_frame(self) -> pd.DataFrame:
        """DataFrame indexed by timestamp, one column per field (NaN = missing)."""
        data = {
            key: np.array([np.nan if v is None else v for v in values], dtype=float)
            for key, values in self.fields.items()
        }
        return pd.DataFrame(data, index=pd.DatetimeIndex(self.timestamps, name="time"))
