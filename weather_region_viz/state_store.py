#!/usr/bin/env python3
"""
Dashboard State Store

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Single owner of the application state the map view and the
render loop read: regions, data-series definitions, active time range,
simulated clock, per-region sample cache, notifications and the theme flag.

Key Features:
1. Region collection (add / delete / reassign data source)
2. Rule editing on data-series definitions (add / update / remove)
3. Per-region sample cache keyed by region id, last-write-wins
4. Async refresh against the weather collaborator; failures keep the
   previously cached series and raise an error notification
5. Stale tracking so the runtime knows when to schedule a refresh

Concurrency:
    All methods run on the runtime's event-loop thread. refresh_samples()
    is the only coroutine; its results are dropped for regions deleted in
    the meantime or when the time range changed while it was in flight.

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from weather_region_viz.classification import ColorResolver
from weather_region_viz.config_types import APP_CONFIG, AppConfig
from weather_region_viz.errors import (
    DataFetchFailure,
    UnknownDataSource,
    UnknownRegion,
)
from weather_region_viz.models.data_models import (
    ClassificationRule,
    DataSeriesDefinition,
    Region,
    SampleSeries,
    TimeRange,
)
from weather_region_viz.notifications import NotificationCenter
from weather_region_viz.weather_source import SampleFetcher

logger = logging.getLogger(__name__)

# Collaborator failures that are reported instead of propagated
FETCH_ERRORS = (DataFetchFailure, OSError, asyncio.TimeoutError)


class DashboardStore:
    """Explicit application state, owned by one controller."""

    def __init__(
        self,
        config: AppConfig = APP_CONFIG,
        fetcher: Optional[SampleFetcher] = None,
        now: Optional[datetime] = None,
        notifications: Optional[NotificationCenter] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher

        self.regions: List[Region] = []
        self.data_sources: Dict[str, DataSeriesDefinition] = {
            d["id"]: DataSeriesDefinition.from_dict(d) for d in config.data_sources
        }
        self.selected_data_source_id = config.default_data_source

        now = now or datetime.now(timezone.utc)
        self.time_range = TimeRange.default_around(
            now, days=config.playback.default_range_days
        )
        self.current_time = self.time_range.start

        self.samples: Dict[str, SampleSeries] = {}
        self._stale: Set[str] = set()

        self.notifications = notifications or NotificationCenter(
            max_visible=config.notifications.max_visible,
            auto_dismiss_s=config.notifications.auto_dismiss_s,
        )
        self.dark_mode = False
        self.is_loading = False

    # ═══════════════════════════════════════════════════════════════════════
    # 🗺️ REGIONS
    # ═══════════════════════════════════════════════════════════════════════

    def get_region(self, region_id: str) -> Region:
        for region in self.regions:
            if region.id == region_id:
                return region
        raise UnknownRegion(region_id)

    def add_region(self, region: Region) -> Region:
        """Append a completed region, bound to the selected data source."""
        if self.selected_data_source_id in self.data_sources:
            region = region.with_data_source(self.selected_data_source_id)
        self.regions.append(region)
        self._stale.add(region.id)
        self.notifications.success(
            "Region Created", f"New region added with {len(region.vertices)} points"
        )
        return region

    def delete_region(self, region_id: str) -> Region:
        """Remove a region and its cached sample series."""
        region = self.get_region(region_id)
        self.regions = [r for r in self.regions if r.id != region_id]
        self.samples.pop(region_id, None)
        self._stale.discard(region_id)
        self.notifications.info("Region Deleted", f"{region.label} removed from analysis")
        return region

    def assign_data_source(self, region_id: str, data_source_id: str) -> Region:
        self.get_data_source(data_source_id)
        updated = self.get_region(region_id).with_data_source(data_source_id)
        self.regions = [updated if r.id == region_id else r for r in self.regions]
        return updated

    # ═══════════════════════════════════════════════════════════════════════
    # 📊 DATA SOURCES AND RULES
    # ═══════════════════════════════════════════════════════════════════════

    def get_data_source(self, data_source_id: str) -> DataSeriesDefinition:
        try:
            return self.data_sources[data_source_id]
        except KeyError:
            raise UnknownDataSource(data_source_id) from None

    def select_data_source(self, data_source_id: str) -> None:
        self.get_data_source(data_source_id)
        self.selected_data_source_id = data_source_id

    def _replace_rules(
        self, data_source_id: str, rules: List[ClassificationRule]
    ) -> DataSeriesDefinition:
        updated = self.get_data_source(data_source_id).with_rules(rules)
        self.data_sources[data_source_id] = updated
        return updated

    def add_rule(
        self, data_source_id: str, rule: ClassificationRule
    ) -> DataSeriesDefinition:
        rules = list(self.get_data_source(data_source_id).rules)
        rules.append(rule)
        return self._replace_rules(data_source_id, rules)

    def update_rule(
        self, data_source_id: str, index: int, rule: ClassificationRule
    ) -> DataSeriesDefinition:
        rules = list(self.get_data_source(data_source_id).rules)
        if not 0 <= index < len(rules):
            raise IndexError(f"Rule index {index} out of range for '{data_source_id}'")
        rules[index] = rule
        return self._replace_rules(data_source_id, rules)

    def remove_rule(self, data_source_id: str, index: int) -> DataSeriesDefinition:
        rules = list(self.get_data_source(data_source_id).rules)
        if not 0 <= index < len(rules):
            raise IndexError(f"Rule index {index} out of range for '{data_source_id}'")
        del rules[index]
        return self._replace_rules(data_source_id, rules)

    # ═══════════════════════════════════════════════════════════════════════
    # ⏱️ TIME
    # ═══════════════════════════════════════════════════════════════════════

    def set_time_range(self, time_range: TimeRange) -> None:
        """Switch range; clock jumps to its start and every series is stale."""
        self.time_range = time_range
        self.current_time = time_range.start
        self._stale = {r.id for r in self.regions}

    def set_current_time(self, current_time: datetime) -> None:
        self.current_time = current_time

    # ═══════════════════════════════════════════════════════════════════════
    # 🌡️ SAMPLE CACHE
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def samples_stale(self) -> bool:
        return bool(self._stale)

    def stale_region_ids(self) -> List[str]:
        return [r.id for r in self.regions if r.id in self._stale]

    def color_resolver(self) -> ColorResolver:
        return ColorResolver(
            definitions=dict(self.data_sources),
            samples=dict(self.samples),
            current_time=self.current_time,
            range_start=self.time_range.start,
            fallback_color=self.config.render.fallback_region_color,
        )

    async def refresh_samples(self, region_ids: Optional[Iterable[str]] = None) -> int:
        """
        Fetch sample series for regions (default: the stale ones).

        Returns:
            Number of series written to the cache
        """
        if self.fetcher is None:
            raise RuntimeError("No weather fetcher configured")

        wanted = set(region_ids) if region_ids is not None else set(self._stale)
        targets = [r for r in self.regions if r.id in wanted]
        if not targets:
            return 0

        self._stale -= {r.id for r in targets}
        requested_range = self.time_range
        self.is_loading = True
        written = 0
        failures: List[str] = []

        try:
            results = await asyncio.gather(
                *(
                    self.fetcher(
                        r.centroid.x,
                        r.centroid.y,
                        requested_range.start,
                        requested_range.end,
                    )
                    for r in targets
                ),
                return_exceptions=True,
            )
        finally:
            self.is_loading = False

        live_ids = {r.id for r in self.regions}
        for region, result in zip(targets, results):
            if isinstance(result, FETCH_ERRORS):
                failures.append(region.label)
                logger.warning(f"⚠️ Sample fetch failed for {region.label}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            if region.id not in live_ids or self.time_range != requested_range:
                logger.debug(f"Dropping superseded samples for {region.label}")
                continue
            self.samples[region.id] = result
            written += 1

        if failures:
            self.notifications.error(
                "Data Error", f"Failed to fetch weather data for {', '.join(failures)}"
            )
        elif written:
            self.notifications.success(
                "Data Updated", f"Weather data refreshed for {written} region(s)"
            )
        return written
