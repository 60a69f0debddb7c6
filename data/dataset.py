"""
Grid dataset assembly.

Tessellates the coverage area once, expands an hourly series for every
cell and packages the result with metadata and the static legend
tables.  Each call builds a fresh, self-contained snapshot; nothing is
computed at import time and no state is shared between calls.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Tuple, Union

from models.grid import Coordinate, GridCell, tessellate
from models.time_series import (
    TimeSeriesPoint,
    build_point,
    expand,
    parse_timestamp,
)
from data.weather import WeatherProvider, RandomWeatherProvider
from data.reference_tables import (
    POLLUTANT_COLOR_SCHEMES,
    POLLUTION_SOURCES,
    SOURCE_COLOR_SCHEMES,
)
from config import (
    DEFAULT_CENTER,
    COVERAGE_RADIUS_KM,
    GRID_SIZE_M,
    TIME_SERIES_HOURS,
    OUTPUT_MODES,
    DEFAULT_OUTPUT_MODE,
)

logger = logging.getLogger(__name__)


def _as_coordinate(value) -> Coordinate:
    """Coerce a Coordinate, a (lat, lng) pair or a {lat, lng} mapping."""
    if isinstance(value, Coordinate):
        return value
    if isinstance(value, Mapping):
        lat = value.get("lat", value.get("latitude"))
        lng = value.get("lng", value.get("longitude"))
        if lat is None or lng is None:
            raise ValueError(f"center mapping needs lat/lng keys, got {sorted(value)}")
    else:
        lat, lng = value
    return Coordinate(lat=float(lat), lng=float(lng))


@dataclass
class GenerationConfig:
    """Parameters of one dataset build.

    Args:
        center: Coverage center as a Coordinate, a (lat, lng) pair or a
            mapping with lat/lng (or latitude/longitude) keys.
        radius_km: Coverage radius (> 0).
        grid_size_m: Cell edge length (> 0).
        start_time: First series instant; datetime or ISO-8601 string.
            Defaults to the current time (UTC).
        include_time_series: Generate the hourly series per cell.
        time_series_hours: Series length (>= 0).
        output_mode: "pollutant" for absolute per-pollutant values or
            "source" for the percentage-of-AQI view.
        shared_dust_conditions: Draw dusty conditions once per cell and
            timestamp rather than once per pollutant.
        seed: Optional seed for a reproducible build.
    """

    center: Union[Coordinate, Tuple[float, float], Mapping[str, float]] = DEFAULT_CENTER
    radius_km: float = COVERAGE_RADIUS_KM
    grid_size_m: float = GRID_SIZE_M
    start_time: Optional[Union[str, datetime]] = None
    include_time_series: bool = True
    time_series_hours: int = TIME_SERIES_HOURS
    output_mode: str = DEFAULT_OUTPUT_MODE
    shared_dust_conditions: bool = True
    seed: Optional[int] = None

    def __post_init__(self):
        self.center = _as_coordinate(self.center)
        if not math.isfinite(self.radius_km) or self.radius_km <= 0:
            raise ValueError(f"radius_km must be a positive number, got {self.radius_km}")
        if not math.isfinite(self.grid_size_m) or self.grid_size_m <= 0:
            raise ValueError(f"grid_size_m must be a positive number, got {self.grid_size_m}")
        hours = self.time_series_hours
        if isinstance(hours, bool) or not isinstance(hours, (int, np.integer)):
            raise ValueError(f"time_series_hours must be an integer, got {hours!r}")
        if hours < 0:
            raise ValueError(f"time_series_hours must be >= 0, got {hours}")
        self.time_series_hours = int(hours)
        if self.output_mode not in OUTPUT_MODES:
            raise ValueError(
                f"Unknown output mode '{self.output_mode}'. Use one of {OUTPUT_MODES}."
            )
        if self.start_time is None:
            self.start_time = datetime.now(timezone.utc)
        self.start_time = parse_timestamp(self.start_time)


@dataclass(frozen=True)
class CellData:
    """A grid cell with its series and a denormalised current reading.

    The current reading and the cell geometry are exposed directly
    (``cell.aqi``, ``cell.pm25``, ``cell.corners``, ...) for simple
    rendering access, mirroring the flattened wire record.
    """

    cell: GridCell
    current: TimeSeriesPoint
    time_series: Tuple[TimeSeriesPoint, ...] = ()

    @property
    def id(self) -> str:
        return self.cell.id

    @property
    def aqi(self) -> float:
        return self.current.reading.aqi

    @property
    def pm25(self) -> float:
        return self.current.reading.pm25

    @property
    def pm10(self) -> float:
        return self.current.reading.pm10

    @property
    def co(self) -> float:
        return self.current.reading.co

    @property
    def no2(self) -> float:
        return self.current.reading.no2

    @property
    def so2(self) -> float:
        return self.current.reading.so2

    @property
    def rh(self) -> float:
        return self.current.reading.rh

    @property
    def temperature(self) -> float:
        return self.current.reading.temperature

    @property
    def wind_speed(self) -> float:
        return self.current.reading.wind_speed

    @property
    def timestamp(self) -> datetime:
        return self.current.timestamp

    @property
    def center(self) -> Coordinate:
        return self.cell.center

    @property
    def bounds(self):
        return self.cell.bounds

    @property
    def corners(self) -> Tuple[Tuple[float, float], ...]:
        return self.cell.corners

    @property
    def distance_from_center(self) -> float:
        return self.cell.distance_from_center

    @property
    def source_contributions(self) -> Dict[str, Dict[str, float]]:
        return self.current.source_contributions

    @property
    def dominant_source(self) -> str:
        return self.current.dominant_source

    def value(self, name: str, default=None):
        """Current value of a reading field; unknown names return *default*."""
        return self.current.reading.value(name, default)

    def contribution(self, pollutant: str, source: str) -> float:
        return self.current.contribution(pollutant, source)


@dataclass(frozen=True)
class GridDataset:
    """Immutable snapshot produced by one generation call."""

    metadata: dict
    cells: Tuple[CellData, ...]
    # Shared read-only tables; mappingproxy is not a permitted plain default
    pollutant_color_schemes: object = field(
        default_factory=lambda: POLLUTANT_COLOR_SCHEMES, repr=False,
    )
    pollution_sources: object = field(default_factory=lambda: POLLUTION_SOURCES, repr=False)
    source_color_schemes: object = field(
        default_factory=lambda: SOURCE_COLOR_SCHEMES, repr=False,
    )

    def __len__(self) -> int:
        return len(self.cells)

    def get_cell(self, cell_id: str) -> Optional[CellData]:
        for cell in self.cells:
            if cell.id == cell_id:
                return cell
        return None


def _build_cell(
    cell: GridCell,
    config: GenerationConfig,
    rng: np.random.Generator,
    weather: WeatherProvider,
) -> CellData:
    series: List[TimeSeriesPoint] = []
    if config.include_time_series:
        series = expand(
            cell,
            config.start_time,
            hours=config.time_series_hours,
            rng=rng,
            weather=weather,
            mode=config.output_mode,
            shared_dust_conditions=config.shared_dust_conditions,
        )

    if series:
        current = series[0]
    else:
        # Every cell carries at least one reading
        current = build_point(
            cell,
            config.start_time,
            rng,
            weather,
            config.output_mode,
            config.shared_dust_conditions,
        )

    return CellData(cell=cell, current=current, time_series=tuple(series))


def generate_grid_dataset(
    config: Optional[GenerationConfig] = None,
    rng: Optional[np.random.Generator] = None,
    weather: Optional[WeatherProvider] = None,
) -> GridDataset:
    """
    Build a complete grid dataset.

    Args:
        config: Generation parameters (defaults: Anand Vihar, 2.5 km, 200 m).
        rng: Random generator.  If omitted one is created from
            ``config.seed`` (unseeded when that is None).
        weather: Environmental reading provider (random by default).

    Returns:
        GridDataset with metadata, cells and reference tables.
    """
    if config is None:
        config = GenerationConfig()
    if rng is None:
        rng = np.random.default_rng(config.seed)
    if weather is None:
        weather = RandomWeatherProvider()

    center = config.center
    logger.info(
        "Generating %s grid around (%.4f, %.4f): radius %.2f km, cell %s m",
        config.output_mode, center.lat, center.lng, config.radius_km, config.grid_size_m,
    )

    grid_cells = tessellate(center, config.radius_km, config.grid_size_m)
    logger.debug("Tessellated %d cells", len(grid_cells))

    cells = tuple(_build_cell(c, config, rng, weather) for c in grid_cells)

    series_hours = config.time_series_hours if config.include_time_series else 0
    metadata = {
        "center": center.as_dict(),
        "radius_km": config.radius_km,
        "grid_size_m": config.grid_size_m,
        "total_grids": len(cells),
        "time_series_hours": series_hours,
        "start_time": config.start_time,
        "generated_at": datetime.now(timezone.utc),
        "coverage": f"{config.radius_km * 2:g}km diameter",
        "data_points": len(cells) * series_hours,
        "output_mode": config.output_mode,
    }

    logger.info(
        "Generated %d cells with %d hours of data each (%d data points)",
        len(cells), series_hours, metadata["data_points"],
    )

    return GridDataset(metadata=metadata, cells=cells)
