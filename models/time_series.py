"""
Hourly time-series expansion for grid cells.

Evaluates the source-contribution model at consecutive hourly instants
starting from a reference time, producing one TimeSeriesPoint per hour.
"""

import numpy as np
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Union

from models.measurement import PollutantReading
from models.source_contribution import compute_contributions, project
from data.weather import WeatherProvider, RandomWeatherProvider
from config import TIME_SERIES_HOURS, DEFAULT_OUTPUT_MODE


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Return an aware datetime; naive values and strings are taken as UTC.

    Accepts ISO-8601 strings including the ``Z`` suffix.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if not isinstance(value, datetime):
        raise ValueError(f"Expected datetime or ISO-8601 string, got {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2025-07-15T08:00:00.000Z``."""
    utc = parse_timestamp(value).astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def hourly_timestamps(start_time: datetime, hours: int) -> List[datetime]:
    """Instants exactly 3600 s apart, expressed in the start time's zone."""
    start = parse_timestamp(start_time)
    start_utc = start.astimezone(timezone.utc)
    return [
        (start_utc + timedelta(hours=h)).astimezone(start.tzinfo)
        for h in range(hours)
    ]


# ---------------------------------------------------------------------------
# Series point
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeSeriesPoint:
    """One generated reading of one cell.

    Args:
        timestamp: Aware datetime of the reading.
        reading: Pollutant and environmental values.
        source_contributions: Pollutant -> {source -> percentage}.
        dominant_source: Largest named contributor to the primary pollutant.
    """

    timestamp: datetime
    reading: PollutantReading
    source_contributions: Dict[str, Dict[str, float]]
    dominant_source: str

    @property
    def hour(self) -> int:
        return self.timestamp.hour

    @property
    def day_of_week(self) -> int:
        """Monday = 0 ... Sunday = 6."""
        return self.timestamp.weekday()

    def contribution(self, pollutant: str, source: str) -> float:
        """Percentage of *pollutant* attributed to *source*; 0.0 if absent."""
        return self.source_contributions.get(pollutant, {}).get(source, 0.0)


def build_point(
    cell,
    timestamp: datetime,
    rng: np.random.Generator,
    weather: WeatherProvider,
    mode: str = DEFAULT_OUTPUT_MODE,
    shared_dust_conditions: bool = True,
) -> TimeSeriesPoint:
    """Evaluate the model and ambient conditions for a single instant."""
    result = project(
        compute_contributions(cell, timestamp, rng, shared_dust_conditions),
        mode,
    )
    environment = weather.sample(timestamp, rng)
    return TimeSeriesPoint(
        timestamp=timestamp,
        reading=PollutantReading.from_parts(result.pollutant_values, environment.as_dict()),
        source_contributions=result.source_contributions,
        dominant_source=result.dominant_source,
    )


def expand(
    cell,
    start_time: datetime,
    hours: int = TIME_SERIES_HOURS,
    rng: Optional[np.random.Generator] = None,
    weather: Optional[WeatherProvider] = None,
    mode: str = DEFAULT_OUTPUT_MODE,
    shared_dust_conditions: bool = True,
) -> List[TimeSeriesPoint]:
    """
    Generate an hourly series for one cell.

    Args:
        cell: GridCell to evaluate.
        start_time: First instant (naive datetimes are taken as UTC).
        hours: Number of points (>= 0); 0 yields an empty list.
        rng: Random generator; a fresh unseeded one is used if omitted.
        weather: Environmental reading provider (random by default).
        mode: Output view, "pollutant" or "source".
        shared_dust_conditions: See ``compute_contributions``.

    Returns:
        Points in strictly increasing timestamp order, 3600 s apart.
    """
    if isinstance(hours, bool) or not isinstance(hours, (int, np.integer)):
        raise ValueError(f"hours must be an integer, got {hours!r}")
    if hours < 0:
        raise ValueError(f"hours must be >= 0, got {hours}")

    if rng is None:
        rng = np.random.default_rng()
    if weather is None:
        weather = RandomWeatherProvider()

    return [
        build_point(cell, ts, rng, weather, mode, shared_dust_conditions)
        for ts in hourly_timestamps(start_time, int(hours))
    ]
