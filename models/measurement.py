"""
Reading data model for generated grid cells.

Represents the pollutant concentrations and ambient conditions attached
to one grid cell at one timestamp.
"""

from dataclasses import dataclass, fields

from config import POLLUTANTS, ENVIRONMENTAL_FIELDS


@dataclass(frozen=True)
class PollutantReading:
    """Pollutant values plus environmental conditions.

    Args:
        aqi: Air Quality Index.
        pm25: PM2.5 (ug/m3).
        pm10: PM10 (ug/m3).
        co: Carbon monoxide (ppm).
        no2: Nitrogen dioxide (ug/m3).
        so2: Sulfur dioxide (ug/m3).
        rh: Relative humidity (%).
        temperature: Air temperature (degrees C).
        wind_speed: Wind speed (m/s).
    """

    aqi: float
    pm25: float
    pm10: float
    co: float
    no2: float
    so2: float
    rh: float
    temperature: float
    wind_speed: float

    def __post_init__(self):
        for name in POLLUTANTS + ("rh", "wind_speed"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_parts(cls, pollutant_values: dict, environment: dict) -> "PollutantReading":
        """Build a reading from pollutant and environment dicts."""
        return cls(
            **{p: pollutant_values[p] for p in POLLUTANTS},
            **{f: environment[f] for f in ENVIRONMENTAL_FIELDS},
        )

    def value(self, name: str, default=None):
        """Look up a field by name; unknown names return *default*."""
        if name in self.field_names():
            return getattr(self, name)
        return default

    @classmethod
    def field_names(cls):
        return tuple(f.name for f in fields(cls))

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.field_names()}
