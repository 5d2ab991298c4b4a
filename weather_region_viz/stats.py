#!/usr/bin/env python3
"""
Live Statistics

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Summary statistics shown above the map: for every data
source, the average of its sample field across all regions at the current
simulated time.

Samples are read at the same hour index the classification engine uses
(whole hours since the active range start). Regions without a cached
series, or with a missing value at that hour, are left out of the average.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import logging
from typing import Any, Dict, List

import pandas as pd

from weather_region_viz.classification import sample_index
from weather_region_viz.state_store import DashboardStore

logger = logging.getLogger(__name__)


def current_samples_frame(store: DashboardStore) -> pd.DataFrame:
    """
    One row per region, one column per sample field, at the current hour.

    Returns:
        DataFrame indexed by region id (NaN where no sample is available)
    """
    index = sample_index(store.current_time, store.time_range.start)
    fields = sorted({d.sample_field_key for d in store.data_sources.values()})

    rows: List[Dict[str, Any]] = []
    for region in store.regions:
        series = store.samples.get(region.id)
        row: Dict[str, Any] = {"region_id": region.id}
        for key in fields:
            value = series.sample(key, index) if series is not None else None
            row[key] = float("nan") if value is None else value
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=fields, index=pd.Index([], name="region_id"))
    return pd.DataFrame(rows).set_index("region_id")


def compute_live_stats(store: DashboardStore) -> Dict[str, Any]:
    """
    Average value per data source at the current time.

    Returns:
        {
            "regionCount": int,
            "currentTime": iso string,
            "sources": [
                {"id", "name", "field", "unit", "color",
                 "average": float | None, "count": int}, ...
            ]
        }
    """
    frame = current_samples_frame(store)
    sources = []
    for definition in store.data_sources.values():
        column = frame.get(definition.sample_field_key)
        values = column.dropna() if column is not None else pd.Series(dtype=float)
        average = round(float(values.mean()), 1) if len(values) else None
        sources.append(
            {
                "id": definition.id,
                "name": definition.display_name,
                "field": definition.sample_field_key,
                "unit": definition.unit,
                "color": definition.base_color,
                "average": average,
                "count": int(len(values)),
            }
        )

    return {
        "regionCount": len(store.regions),
        "currentTime": store.current_time.isoformat(),
        "sources": sources,
    }
