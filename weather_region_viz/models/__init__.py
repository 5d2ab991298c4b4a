"""Data models package for typed region, rule and sample-series structures."""

from .data_models import (
    HOUR,
    AtLeast,
    CanvasSize,
    ClassificationRule,
    DataSeriesDefinition,
    LessThan,
    Point,
    Range,
    Region,
    SampleSeries,
    TimeRange,
    Viewport,
    parse_instant,
    rule_from_dict,
)

__all__ = [
    "HOUR",
    # Geometry primitives
    "Point",
    "CanvasSize",
    "Viewport",
    "Region",
    # Classification rules
    "ClassificationRule",
    "LessThan",
    "AtLeast",
    "Range",
    "rule_from_dict",
    # Data series
    "DataSeriesDefinition",
    "SampleSeries",
    "TimeRange",
    "parse_instant",
]
