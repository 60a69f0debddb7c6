"""Shared fixtures for the Air-Quality Grid Generator test suite."""

import sys
import os
import pytest
import numpy as np
from datetime import datetime, timezone

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture
def center():
    """Anand Vihar, the default coverage center."""
    from models.grid import Coordinate
    return Coordinate(lat=28.6469, lng=77.3154)


@pytest.fixture
def small_cells(center):
    """A 300 m radius grid of 200 m cells (nine cells)."""
    from models.grid import tessellate
    return tessellate(center, radius_km=0.3, grid_size_m=200)


@pytest.fixture
def rng():
    """Seeded generator for exact, reproducible draws."""
    return np.random.default_rng(42)


@pytest.fixture
def stub_weather():
    """Fixed environmental conditions."""
    from data.weather import StubWeatherProvider
    return StubWeatherProvider(rh=40.0, temperature=31.0, wind_speed=3.5)


@pytest.fixture
def tuesday_morning():
    """Tuesday 2025-07-15 08:00 UTC (weekday rush hour)."""
    return datetime(2025, 7, 15, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def saturday_afternoon():
    """Saturday 2025-07-19 14:00 UTC."""
    return datetime(2025, 7, 19, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def small_dataset(stub_weather, tuesday_morning):
    """Seeded dataset over the small grid with a 6-hour series."""
    from data.dataset import GenerationConfig, generate_grid_dataset
    config = GenerationConfig(
        radius_km=0.3,
        grid_size_m=200,
        start_time=tuesday_morning,
        time_series_hours=6,
        seed=7,
    )
    return generate_grid_dataset(config, weather=stub_weather)
