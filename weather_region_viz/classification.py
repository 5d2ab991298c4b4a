#!/usr/bin/env python3
"""
Classification Engine

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Map a region's sample at the current simulated time to a
display color using its data source's ordered threshold rules.

Algorithm (color_for):
1. No sample series, or no samples for the definition's field -> base color
2. index = floor((current_time - range_start) / 1 hour)
   (measured from the ACTIVE TIME RANGE start, not the series' first stamp);
   out of bounds -> base color
3. Missing sample at index -> base color
4. First rule in declaration order whose predicate holds -> its color
5. No rule matches -> base color

The function is total and pure. Rules are never sorted: with overlapping
rules the earlier-declared one wins.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

from datetime import datetime
from typing import Mapping, Optional, Sequence

from weather_region_viz.models.data_models import (
    HOUR,
    ClassificationRule,
    DataSeriesDefinition,
    Region,
    SampleSeries,
)

FALLBACK_COLOR = "#6b7280"


def sample_index(current_time: datetime, range_start: datetime) -> int:
    """Whole hours elapsed since range_start (negative before the start)."""
    return int((current_time - range_start) // HOUR)


def classify_value(
    value: float,
    rules: Sequence[ClassificationRule],
    base_color: str,
) -> str:
    """Color of the first matching rule, else base_color."""
    for rule in rules:
        if rule.matches(value):
            return rule.color
    return base_color


def color_for(
    region: Region,
    definition: DataSeriesDefinition,
    samples: Optional[SampleSeries],
    current_time: datetime,
    range_start: datetime,
) -> str:
    """
    Resolve a region's display color at current_time.

    Args:
        region: Region being colored (its series is passed as samples)
        definition: Data-series definition bound to the region
        samples: Cached sample series for the region, or None
        current_time: Simulated clock
        range_start: Start of the active time range

    Returns:
        Hex color string, never raises
    """
    if samples is None or not samples.has_field(definition.sample_field_key):
        return definition.base_color

    index = sample_index(current_time, range_start)
    value = samples.sample(definition.sample_field_key, index)
    if value is None:
        return definition.base_color

    return classify_value(value, definition.rules, definition.base_color)


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 STORE-BOUND RESOLVER
# ═══════════════════════════════════════════════════════════════════════════


class ColorResolver:
    """
    Binds color_for to one snapshot of application state.

    Built once per frame so every region is classified against the same
    definitions, sample cache and clock.
    """

    def __init__(
        self,
        definitions: Mapping[str, DataSeriesDefinition],
        samples: Mapping[str, SampleSeries],
        current_time: datetime,
        range_start: datetime,
        fallback_color: str = FALLBACK_COLOR,
    ) -> None:
        self._definitions = definitions
        self._samples = samples
        self.current_time = current_time
        self.range_start = range_start
        self.fallback_color = fallback_color

    def __call__(self, region: Region) -> str:
        definition = self._definitions.get(region.data_source_id)
        if definition is None:
            return self.fallback_color
        return color_for(
            region,
            definition,
            self._samples.get(region.id),
            self.current_time,
            self.range_start,
        )

    def value_for(self, region: Region) -> Optional[float]:
        """Raw sample behind the region's color (None when unavailable)."""
        definition = self._definitions.get(region.data_source_id)
        series = self._samples.get(region.id)
        if definition is None or series is None:
            return None
        return series.sample(
            definition.sample_field_key,
            sample_index(self.current_time, self.range_start),
        )
