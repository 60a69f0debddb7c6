"""
Environmental readings attached to every grid reading.

Provides a pluggable interface for humidity, temperature and wind speed.
RandomWeatherProvider draws plausible values from a generator; the
StubWeatherProvider returns configurable fixed values for development
and testing.
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from config import HUMIDITY_RANGE_PCT, TEMPERATURE_RANGE_C, WIND_SPEED_RANGE_MPS


@dataclass(frozen=True)
class EnvironmentalReading:
    """Ambient conditions at a cell at one instant."""

    rh: float                       # Relative humidity (%)
    temperature: float              # degrees C
    wind_speed: float               # m/s

    def __post_init__(self):
        if self.rh < 0:
            raise ValueError("Relative humidity must be >= 0")
        if self.wind_speed < 0:
            raise ValueError("Wind speed must be >= 0")

    def as_dict(self) -> dict:
        return {
            "rh": self.rh,
            "temperature": self.temperature,
            "wind_speed": self.wind_speed,
        }


class WeatherProvider(ABC):
    """Abstract base class for environmental reading sources."""

    @abstractmethod
    def sample(self, timestamp: datetime, rng: np.random.Generator) -> EnvironmentalReading:
        """Return conditions at *timestamp*.

        Args:
            timestamp: Instant being generated.
            rng: Generator shared with the rest of the dataset build.
        """
        ...


class RandomWeatherProvider(WeatherProvider):
    """Uniform draws over fixed humidity / temperature / wind ranges.

    Each range is given as (low, spread) and sampled as
    uniform(low, low + spread).
    """

    def __init__(
        self,
        humidity=HUMIDITY_RANGE_PCT,
        temperature=TEMPERATURE_RANGE_C,
        wind_speed=WIND_SPEED_RANGE_MPS,
    ):
        self.humidity = humidity
        self.temperature = temperature
        self.wind_speed = wind_speed

    @staticmethod
    def _draw(rng: np.random.Generator, value_range) -> float:
        low, spread = value_range
        return round(low + float(rng.uniform(0.0, spread)), 1)

    def sample(self, timestamp: datetime, rng: np.random.Generator) -> EnvironmentalReading:
        return EnvironmentalReading(
            rh=self._draw(rng, self.humidity),
            temperature=self._draw(rng, self.temperature),
            wind_speed=self._draw(rng, self.wind_speed),
        )


class StubWeatherProvider(WeatherProvider):
    """Configurable stub that returns the same conditions every time.

    Args:
        rh: Relative humidity (%).
        temperature: Temperature (degrees C).
        wind_speed: Wind speed (m/s).
    """

    def __init__(self, rh: float = 50.0, temperature: float = 30.0, wind_speed: float = 3.0):
        self.rh = rh
        self.temperature = temperature
        self.wind_speed = wind_speed

    def sample(self, timestamp: datetime, rng: np.random.Generator) -> EnvironmentalReading:
        return EnvironmentalReading(
            rh=self.rh,
            temperature=self.temperature,
            wind_speed=self.wind_speed,
        )
