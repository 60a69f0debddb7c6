"""
Geographic projection helpers.

Converts metric offsets into degree deltas and measures distances between
points near a reference location.  The grid tessellator relies on the
cheap equirectangular approximation, which is accurate for the few-km
extents of a neighbourhood coverage area but not for continental ones.
"""

import math
import numpy as np
from typing import Tuple

from config import EARTH_RADIUS_M, METERS_PER_DEGREE_APPROX


def meters_to_degrees(meters: float, latitude: float) -> Tuple[float, float]:
    """
    Convert a metric offset into latitude/longitude degree deltas.

    Uses a spherical Earth.  Longitude degrees shrink with cos(latitude),
    so the conversion diverges at the poles; callers must not pass
    latitudes of +/-90.

    Args:
        meters: Offset in meters.
        latitude: Reference latitude in decimal degrees.

    Returns:
        (lat_degrees, lng_degrees) covering the same metric distance.
    """
    meters_per_degree_lat = (math.pi * EARTH_RADIUS_M) / 180.0
    meters_per_degree_lng = meters_per_degree_lat * math.cos(math.radians(latitude))
    return meters / meters_per_degree_lat, meters / meters_per_degree_lng


def wrap_longitude(lng):
    """Map longitude(s) into [-180, 180)."""
    return (np.asarray(lng) + 180.0) % 360.0 - 180.0


def planar_distance_meters(center_lat, center_lng, point_lat, point_lng):
    """
    Equirectangular distance approximation between a center and point(s).

    Works on scalars or numpy arrays (the point arguments may be arrays
    of equal shape).

    Args:
        center_lat, center_lng: Reference point in decimal degrees.
        point_lat, point_lng: Target point(s) in decimal degrees.

    Returns:
        Distance in meters (float for scalar input, ndarray otherwise).
    """
    dy = (np.asarray(point_lat) - center_lat) * METERS_PER_DEGREE_APPROX
    dlng = np.asarray(point_lng) - center_lng
    # Shortest way round across the antimeridian
    dlng = np.where(np.abs(dlng) > 180.0, wrap_longitude(dlng), dlng)
    dx = dlng * METERS_PER_DEGREE_APPROX * math.cos(math.radians(center_lat))
    dist = np.hypot(dx, dy)
    if dist.ndim == 0:
        return float(dist)
    return dist


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = (math.sin(dphi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2)
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))
