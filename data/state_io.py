"""
Dataset serialization / deserialization.

Encodes a GridDataset as the JSON document consumed by the map UI:
camelCase keys, ISO-8601 UTC timestamps, and each cell's current
reading flattened onto the cell record.
"""

import json
import logging
from typing import Any, Dict, List, Union

from models.grid import Bounds, Coordinate, GridCell
from models.measurement import PollutantReading
from models.time_series import TimeSeriesPoint, format_timestamp, parse_timestamp
from data.dataset import CellData, GridDataset
from data.reference_tables import thaw
from config import POLLUTANTS

logger = logging.getLogger(__name__)

# Python field name -> wire key
_READING_KEYS = {p: p for p in POLLUTANTS}
_READING_KEYS.update({"rh": "rh", "temperature": "temperature", "wind_speed": "windSpeed"})

_METADATA_KEYS = {
    "center": "center",
    "radius_km": "radiusKm",
    "grid_size_m": "gridSizeM",
    "total_grids": "totalGrids",
    "time_series_hours": "timeSeriesHours",
    "start_time": "startTime",
    "generated_at": "generatedAt",
    "coverage": "coverage",
    "data_points": "dataPoints",
    "output_mode": "outputMode",
}


def _wire_day_of_week(point: TimeSeriesPoint) -> int:
    # The map UI counts days from Sunday = 0
    return (point.day_of_week + 1) % 7


def point_to_dict(point: TimeSeriesPoint) -> Dict[str, Any]:
    """Encode one series point."""
    record: Dict[str, Any] = {
        "timestamp": format_timestamp(point.timestamp),
        "hour": point.hour,
        "dayOfWeek": _wire_day_of_week(point),
    }
    for name, key in _READING_KEYS.items():
        record[key] = getattr(point.reading, name)
    record["sourceContributions"] = {
        pollutant: dict(shares)
        for pollutant, shares in point.source_contributions.items()
    }
    record["dominantSource"] = point.dominant_source
    return record


def point_from_dict(record: Dict[str, Any]) -> TimeSeriesPoint:
    """Decode one series point (or a flattened cell record)."""
    reading = PollutantReading(
        **{name: float(record[key]) for name, key in _READING_KEYS.items()}
    )
    return TimeSeriesPoint(
        timestamp=parse_timestamp(record["timestamp"]),
        reading=reading,
        source_contributions={
            pollutant: {s: float(v) for s, v in shares.items()}
            for pollutant, shares in record["sourceContributions"].items()
        },
        dominant_source=record["dominantSource"],
    )


def cell_to_dict(cell_data: CellData, grid_size_m: float) -> Dict[str, Any]:
    """Encode a cell with its current reading merged onto the record."""
    cell = cell_data.cell
    record: Dict[str, Any] = {
        "id": cell.id,
        "centerLat": cell.center.lat,
        "centerLng": cell.center.lng,
        "bounds": cell.bounds.as_dict(),
        "distanceFromCenter": cell.distance_from_center,
        "corners": [list(corner) for corner in cell.corners],
    }
    record.update(point_to_dict(cell_data.current))
    record["timeSeries"] = [point_to_dict(p) for p in cell_data.time_series]
    record["gridSizeMeters"] = grid_size_m
    record["dataQuality"] = "generated"
    return record


def cell_from_dict(record: Dict[str, Any]) -> CellData:
    """Decode a cell record produced by ``cell_to_dict``."""
    bounds = Bounds(**{k: float(record["bounds"][k]) for k in ("north", "south", "east", "west")})
    cell = GridCell(
        id=record["id"],
        center=Coordinate(lat=float(record["centerLat"]), lng=float(record["centerLng"])),
        bounds=bounds,
        corners=tuple((float(lat), float(lng)) for lat, lng in record["corners"]),
        distance_from_center=float(record["distanceFromCenter"]),
    )
    return CellData(
        cell=cell,
        current=point_from_dict(record),
        time_series=tuple(point_from_dict(p) for p in record.get("timeSeries", [])),
    )


def dataset_to_dict(dataset: GridDataset) -> Dict[str, Any]:
    """Encode a dataset as a JSON-compatible dict."""
    metadata = {}
    for name, key in _METADATA_KEYS.items():
        if name not in dataset.metadata:
            continue
        value = dataset.metadata[name]
        if name in ("start_time", "generated_at"):
            value = format_timestamp(value)
        metadata[key] = value

    grid_size_m = dataset.metadata.get("grid_size_m")
    return {
        "metadata": metadata,
        "grids": [cell_to_dict(c, grid_size_m) for c in dataset.cells],
        "pollutantColorSchemes": thaw(dataset.pollutant_color_schemes),
        "pollutionSources": thaw(dataset.pollution_sources),
        "sourceColorSchemes": thaw(dataset.source_color_schemes),
    }


def serialize_dataset(dataset: GridDataset) -> bytes:
    """Serialize a dataset to UTF-8 JSON bytes."""
    payload = json.dumps(dataset_to_dict(dataset), ensure_ascii=False)
    logger.debug("Serialized %d cells (%d bytes)", len(dataset.cells), len(payload))
    return payload.encode("utf-8")


def deserialize_dataset(data: Union[bytes, str, Dict[str, Any]]) -> GridDataset:
    """Rebuild a GridDataset from JSON bytes/text or an already-decoded dict.

    Reference tables are taken from this package rather than the payload.
    """
    if isinstance(data, (bytes, str)):
        data = json.loads(data)
    if not isinstance(data, dict) or "grids" not in data:
        raise ValueError("Dataset payload must be an object with a 'grids' array")

    wire_meta = data.get("metadata", {})
    metadata: Dict[str, Any] = {}
    for name, key in _METADATA_KEYS.items():
        if key not in wire_meta:
            continue
        value = wire_meta[key]
        if name in ("start_time", "generated_at"):
            value = parse_timestamp(value)
        metadata[name] = value

    cells: List[CellData] = [cell_from_dict(record) for record in data["grids"]]
    return GridDataset(metadata=metadata, cells=tuple(cells))
