"""
Tests for the synthetic weather generator.

Run with: python -m pytest weather_region_viz/_tests/test_weather_source.py -v
"""

import asyncio
from datetime import timedelta

import numpy as np
import pytest

from weather_region_viz.config_types import WeatherSourceConfig
from weather_region_viz.errors import DataFetchFailure
from weather_region_viz.weather_source import (
    FIELD_KEYS,
    SyntheticWeatherSource,
    generate_hourly_payload,
)
from weather_region_viz._tests.conftest import NOW


def _fetch(source, lat=0.0, lon=0.0, hours=48):
    return asyncio.run(source.fetch_samples(lat, lon, NOW, NOW + timedelta(hours=hours)))


class TestGenerateHourlyPayload:
    """Shape and value ranges of the generated payload."""

    def test_one_sample_per_hour(self):
        payload = generate_hourly_payload(
            0.0, 0.0, NOW, NOW + timedelta(hours=24), np.random.default_rng(1)
        )
        hourly = payload["hourly"]
        assert len(hourly["time"]) == 24
        for key in FIELD_KEYS:
            assert len(hourly[key]) == 24

    def test_value_ranges(self):
        hourly = generate_hourly_payload(
            0.0, 0.0, NOW, NOW + timedelta(days=10), np.random.default_rng(2)
        )["hourly"]
        assert all(50 <= v <= 90 for v in hourly["relative_humidity_2m"])
        assert all(0 <= v <= 5 for v in hourly["precipitation"])
        assert all(5 <= v <= 20 for v in hourly["wind_speed_10m"])
        assert all(-10 <= v <= 40 for v in hourly["temperature_2m"])

    def test_empty_range(self):
        payload = generate_hourly_payload(0.0, 0.0, NOW, NOW, np.random.default_rng(3))
        assert payload["hourly"]["time"] == []


class TestSyntheticWeatherSource:
    """Async fetch behavior."""

    def test_seeded_sources_agree(self):
        config = WeatherSourceConfig(latency_s=0, seed=42)
        first = _fetch(SyntheticWeatherSource(config))
        second = _fetch(SyntheticWeatherSource(config))
        assert first == second
        assert len(first) == 48
        assert first.timestamps[0] == NOW

    def test_location_shifts_temperature(self):
        config = WeatherSourceConfig(latency_s=0, seed=7)
        near = _fetch(SyntheticWeatherSource(config), lat=0.0)
        far = _fetch(SyntheticWeatherSource(config), lat=200.0)
        # same noise draws, base temperature 20 degrees higher
        delta = np.array(far.fields["temperature_2m"]) - np.array(near.fields["temperature_2m"])
        assert np.allclose(delta, 20.0, atol=0.11)

    def test_failure_rate_raises(self):
        source = SyntheticWeatherSource(WeatherSourceConfig(latency_s=0, failure_rate=1.0))
        with pytest.raises(DataFetchFailure):
            _fetch(source)

    def test_callable_alias(self):
        source = SyntheticWeatherSource(WeatherSourceConfig(latency_s=0, seed=1))
        series = asyncio.run(source(1.0, 2.0, NOW, NOW + timedelta(hours=3)))
        assert len(series) == 3
