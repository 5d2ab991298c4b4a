"""
Dashboard Export Module - JSON snapshot and CSV sample tables.

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Serialize the dashboard state for download or archiving.

Export Formats:
- JSON: full snapshot (regions, data sources, time range, current time,
  cached weather samples). Not versioned; consumers read it as-is.
- CSV: cached sample series flattened to one row per (region, hour)

Key Entry Points:
- build_export_snapshot(): snapshot dict
- export_snapshot_json(): snapshot as a JSON string
- export_snapshot_file(): weather-regions-YYYY-MM-DD.json in an output dir
- export_samples_csv(): weather-samples-YYYY-MM-DD.csv in an output dir

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from weather_region_viz.state_store import DashboardStore

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# 🔧 HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════


def snapshot_filename(day: Optional[date] = None) -> str:
    """
    Generate the snapshot filename for a day.

    Args:
        day: Export date (defaults to today)

    Returns:
        Filename string (e.g., "weather-regions-2024-03-01.json")
    """
    day = day or date.today()
    return f"weather-regions-{day.isoformat()}.json"


def samples_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"weather-samples-{day.isoformat()}.csv"


# ═══════════════════════════════════════════════════════════════════════════
# 📤 JSON SNAPSHOT
# ═══════════════════════════════════════════════════════════════════════════


def build_export_snapshot(store: DashboardStore) -> Dict[str, Any]:
    """
    Build the export snapshot.

    Returns:
        {
            "polygons": [region dicts],
            "dataSources": [definition dicts],
            "timeRange": {"start", "end"},
            "currentTime": iso string,
            "weatherData": {region_id: {"hourly": {...}}}
        }
    """
    return {
        "polygons": [r.to_dict() for r in store.regions],
        "dataSources": [d.to_dict() for d in store.data_sources.values()],
        "timeRange": store.time_range.to_dict(),
        "currentTime": store.current_time.isoformat(),
        "weatherData": {
            region_id: series.to_payload() for region_id, series in store.samples.items()
        },
    }


def export_snapshot_json(store: DashboardStore, indent: Optional[int] = 2) -> str:
    return json.dumps(build_export_snapshot(store), indent=indent)


def export_snapshot_file(
    store: DashboardStore,
    output_dir: Union[str, Path],
    day: Optional[date] = None,
) -> Path:
    """
    Write the JSON snapshot to output_dir and raise a success notification.

    Returns:
        Path to the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / snapshot_filename(day)
    path.write_text(export_snapshot_json(store), encoding="utf-8")

    logger.info(f"💾 Snapshot exported: {path} ({len(store.regions)} regions)")
    store.notifications.success("Data Exported", "Project data exported successfully")
    return path


# ═══════════════════════════════════════════════════════════════════════════
# 📊 CSV SAMPLES
# ═══════════════════════════════════════════════════════════════════════════


def samples_dataframe(store: DashboardStore) -> pd.DataFrame:
    """Cached samples as a long table: region_id, time, one column per field."""
    frames = []
    for region in store.regions:
        series = store.samples.get(region.id)
        if series is None or len(series) == 0:
            continue
        frame = series.to_frame().reset_index()
        frame.insert(0, "region_id", region.id)
        frames.append(frame)
    if not frames:
        return pd.DataFrame(columns=["region_id", "time"])
    return pd.concat(frames, ignore_index=True)


def export_samples_csv(
    store: DashboardStore,
    output_dir: Union[str, Path],
    day: Optional[date] = None,
) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / samples_filename(day)
    df = samples_dataframe(store)
    df.to_csv(path, index=False)
    logger.info(f"📄 Exported {len(df)} sample rows to {path}")
    return path
