#!/usr/bin/env python3
"""
Synthetic Weather Source

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Stand-in for a weather API. Produces hourly samples for a
coordinate pair and a time range, shaped like an Open-Meteo style payload,
and ingests them through SampleSeries.from_payload so the rest of the app
only ever sees validated series.

Generated fields (one value per whole hour in [start, end)):
- temperature_2m: 15 + lat/10 + lon/20, +/-8 diurnal, +/-15 seasonal, +/-2 noise
- relative_humidity_2m: 50..90
- precipitation: 0 most hours, 0..5 with 10% probability
- wind_speed_10m: 5..20
All rounded to one decimal.

Coordinates are flat world coordinates; a region centroid (x, y) is passed
as (latitude, longitude).

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, Optional

import numpy as np

from weather_region_viz.config_types import WeatherSourceConfig
from weather_region_viz.errors import DataFetchFailure
from weather_region_viz.models.data_models import HOUR, SampleSeries

logger = logging.getLogger(__name__)

# Collaborator contract: fetch_samples(latitude, longitude, start, end)
SampleFetcher = Callable[[float, float, datetime, datetime], Awaitable[SampleSeries]]

FIELD_KEYS = (
    "temperature_2m",
    "relative_humidity_2m",
    "precipitation",
    "wind_speed_10m",
)


def generate_hourly_payload(
    latitude: float,
    longitude: float,
    start: datetime,
    end: datetime,
    rng: np.random.Generator,
) -> Dict[str, Any]:
    """
    Build an hourly weather payload.

    Args:
        latitude: First coordinate (region centroid x)
        longitude: Second coordinate (region centroid y)
        start: First sample instant
        end: Range end (exclusive)
        rng: numpy random generator

    Returns:
        {"hourly": {"time": [...], <field>: [...]}}
    """
    hours = max(0, int((end - start) // HOUR))
    times = [start + timedelta(hours=i) for i in range(hours)]

    hour_of_day = np.array([t.hour for t in times], dtype=float)
    day_of_year = np.array([t.timetuple().tm_yday for t in times], dtype=float)

    base_temp = 15 + latitude / 10 + longitude / 20
    daily = np.sin((hour_of_day - 6) * np.pi / 12) * 8
    seasonal = np.sin((day_of_year - 80) * 2 * np.pi / 365) * 15
    noise = (rng.random(hours) - 0.5) * 4
    temperature = base_temp + daily + seasonal + noise

    humidity = 50 + rng.random(hours) * 40
    rain_mask = rng.random(hours) < 0.1
    precipitation = np.where(rain_mask, rng.random(hours) * 5, 0.0)
    wind = 5 + rng.random(hours) * 15

    return {
        "hourly": {
            "time": [t.isoformat() for t in times],
            "temperature_2m": np.round(temperature, 1).tolist(),
            "relative_humidity_2m": np.round(humidity, 1).tolist(),
            "precipitation": np.round(precipitation, 1).tolist(),
            "wind_speed_10m": np.round(wind, 1).tolist(),
        }
    }


class SyntheticWeatherSource:
    """
    Asynchronous synthetic weather collaborator.

    Usage:
        source = SyntheticWeatherSource(WeatherSourceConfig(latency_s=0))
        series = await source.fetch_samples(12.0, 4.0, start, end)
    """

    def __init__(self, config: Optional[WeatherSourceConfig] = None) -> None:
        self.config = config or WeatherSourceConfig()
        self._rng = np.random.default_rng(self.config.seed)

    async def fetch_samples(
        self,
        latitude: float,
        longitude: float,
        range_start: datetime,
        range_end: datetime,
    ) -> SampleSeries:
        """
        Fetch (synthesize) hourly samples for a location and range.

        Raises:
            DataFetchFailure: simulated outage (failure_rate) or a payload
                that fails validation
        """
        if self.config.latency_s > 0:
            await asyncio.sleep(self.config.latency_s)

        if self.config.failure_rate and self._rng.random() < self.config.failure_rate:
            raise DataFetchFailure(
                f"Weather service unavailable for ({latitude:.1f}, {longitude:.1f})"
            )

        payload = generate_hourly_payload(
            latitude, longitude, range_start, range_end, self._rng
        )
        series = SampleSeries.from_payload(payload)
        logger.debug(
            f"🌡️ Generated {len(series)} hourly samples for ({latitude:.1f}, {longitude:.1f})"
        )
        return series

    __call__ = fetch_samples
