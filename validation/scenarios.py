"""
Pre-defined evaluation scenarios for validating the source model.

Timing scenario functions return a dict with:
    - timestamp: aware datetime to evaluate
    - distance_m: cell distance from the coverage center
    - description: human-readable summary

Grid scenario functions return a GenerationConfig.
"""

from datetime import datetime, timezone

from data.dataset import GenerationConfig
from config import DEFAULT_CENTER

# 2025-07-15 is a Tuesday, 2025-07-19 a Saturday
_TUESDAY = (2025, 7, 15)
_SATURDAY = (2025, 7, 19)


def _at(day, hour: int) -> datetime:
    return datetime(*day, hour, 0, tzinfo=timezone.utc)


def scenario_weekday_rush_hour() -> dict:
    """Tuesday 08:00 close to the center.

    Rush-hour traffic plus the near-center road-density boost; vehicle
    emissions should dominate CO and NO2.
    """
    return {
        "timestamp": _at(_TUESDAY, 8),
        "distance_m": 400.0,
        "description": "Weekday morning rush hour, 400 m from center",
    }


def scenario_weekday_afternoon() -> dict:
    """Tuesday 14:00: peak construction and afternoon dust."""
    return {
        "timestamp": _at(_TUESDAY, 14),
        "distance_m": 1500.0,
        "description": "Weekday mid-afternoon, 1.5 km from center",
    }


def scenario_weekend_afternoon() -> dict:
    """Saturday 14:00: construction idle, reduced traffic, afternoon dust."""
    return {
        "timestamp": _at(_SATURDAY, 14),
        "distance_m": 1500.0,
        "description": "Weekend mid-afternoon, 1.5 km from center",
    }


def scenario_night() -> dict:
    """Tuesday 02:00 at the coverage edge: every source at its floor."""
    return {
        "timestamp": _at(_TUESDAY, 2),
        "distance_m": 2400.0,
        "description": "Weekday night, near the coverage edge",
    }


def scenario_small_grid() -> GenerationConfig:
    """300 m radius at 200 m cells: a handful of cells around the center."""
    return GenerationConfig(
        center=DEFAULT_CENTER,
        radius_km=0.3,
        grid_size_m=200,
        start_time=_at(_TUESDAY, 0),
        time_series_hours=24,
    )


def scenario_default_coverage() -> GenerationConfig:
    """Full 2.5 km coverage at 200 m cells, three days from Tuesday midnight."""
    return GenerationConfig(start_time=_at(_TUESDAY, 0))
