"""
Spatial grid model and tessellator.

Covers a circular area around a center point with square cells.  Cells
are laid out on a regular lattice in degree space and kept only when
their center falls inside the coverage radius, so the result is an
approximately circular patch rather than a square.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import List, Tuple

from models.geo_projection import meters_to_degrees, planar_distance_meters, wrap_longitude


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self):
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"Coordinate must be finite, got ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")

    def as_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned cell edges in decimal degrees."""

    north: float
    south: float
    east: float
    west: float

    def as_dict(self) -> dict:
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
        }


@dataclass(frozen=True)
class GridCell:
    """A single square cell of the coverage grid.

    Args:
        id: Identifier unique within one tessellation (``grid_<n>``).
        center: Cell center.
        bounds: Cell edges.
        corners: Four (lat, lng) tuples ordered NW, NE, SE, SW.
        distance_from_center: Planar distance to the coverage center (meters).
    """

    id: str
    center: Coordinate
    bounds: Bounds
    corners: Tuple[Tuple[float, float], ...]
    distance_from_center: float

    @property
    def distance_km(self) -> float:
        return self.distance_from_center / 1000.0


def cell_corners(bounds: Bounds) -> Tuple[Tuple[float, float], ...]:
    """Return the polygon corners of a cell: NW, NE, SE, SW."""
    return (
        (bounds.north, bounds.west),
        (bounds.north, bounds.east),
        (bounds.south, bounds.east),
        (bounds.south, bounds.west),
    )


def tessellate(
    center: Coordinate,
    radius_km: float,
    grid_size_m: float,
) -> List[GridCell]:
    """
    Enumerate all grid cells whose centers lie within the coverage radius.

    Lattice offsets run from -n to n on both axes with
    n = ceil(radius / cell size).  Iteration is row-major (latitude
    offset outer, longitude offset inner) and cell ids are assigned in
    that order, so identical inputs always yield identical ids.

    Args:
        center: Coverage center.
        radius_km: Coverage radius in kilometers (> 0).
        grid_size_m: Cell edge length in meters (> 0).

    Returns:
        Ordered list of GridCell.
    """
    if radius_km <= 0:
        raise ValueError(f"radius_km must be > 0, got {radius_km}")
    if grid_size_m <= 0:
        raise ValueError(f"grid_size_m must be > 0, got {grid_size_m}")

    radius_m = radius_km * 1000.0
    lat_step, lng_step = meters_to_degrees(grid_size_m, center.lat)
    grid_count = math.ceil(radius_m / grid_size_m)

    offsets = np.arange(-grid_count, grid_count + 1)
    I, J = np.meshgrid(offsets, offsets, indexing="ij")
    cell_lat = center.lat + I * lat_step
    cell_lng = center.lng + J * lng_step

    distance = planar_distance_meters(center.lat, center.lng, cell_lat, cell_lng)
    # Cells past the antimeridian wrap around; cells past a pole are dropped
    cell_lng = np.where(np.abs(cell_lng) > 180.0, wrap_longitude(cell_lng), cell_lng)
    inside = (distance <= radius_m) & (np.abs(cell_lat) <= 90.0)
    # np.nonzero walks the mask in C (row-major) order
    rows, cols = np.nonzero(inside)

    half_lat = lat_step / 2.0
    half_lng = lng_step / 2.0
    cells = []
    for n, (r, c) in enumerate(zip(rows, cols)):
        lat = float(cell_lat[r, c])
        lng = float(cell_lng[r, c])
        bounds = Bounds(
            north=lat + half_lat,
            south=lat - half_lat,
            east=lng + half_lng,
            west=lng - half_lng,
        )
        cells.append(GridCell(
            id=f"grid_{n}",
            center=Coordinate(lat=lat, lng=lng),
            bounds=bounds,
            corners=cell_corners(bounds),
            distance_from_center=float(distance[r, c]),
        ))

    return cells
