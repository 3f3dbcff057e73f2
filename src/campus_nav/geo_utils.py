# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules.

import math
from typing import List, Sequence, Tuple

import numpy as np


EARTH_RADIUS_M = 6_371_000.0

LatLon = Tuple[float, float]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_many(lat: float, lon: float, points: np.ndarray) -> np.ndarray:
    """
    Distances in metres from one point to every row of an (N, 2) lat/lon array.

    Same formula as haversine_distance, evaluated in one numpy pass.
    """
    pts = np.radians(np.asarray(points, dtype=np.float64).reshape(-1, 2))
    rlat, rlon = math.radians(lat), math.radians(lon)
    d_lat = pts[:, 0] - rlat
    d_lon = pts[:, 1] - rlon
    a = (
        np.sin(d_lat / 2) ** 2
        + math.cos(rlat) * np.cos(pts[:, 0]) * np.sin(d_lon / 2) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def nearest_index(lat: float, lon: float, points: np.ndarray) -> Tuple[int, float]:
    """Index of the closest row in points and its distance. First index wins ties."""
    dists = haversine_many(lat, lon, points)
    idx = int(np.argmin(dists))
    return idx, float(dists[idx])


def path_length(points: Sequence[LatLon]) -> float:
    """Sum of consecutive pairwise distances in metres."""
    return sum(
        haversine_distance(a[0], a[1], b[0], b[1])
        for a, b in zip(points, points[1:])
    )


def interpolate(start: LatLon, end: LatLon, fraction: float) -> LatLon:
    """Linear interpolation in lat/lon space. Fine at campus scale."""
    f = min(max(fraction, 0.0), 1.0)
    return (
        start[0] + (end[0] - start[0]) * f,
        start[1] + (end[1] - start[1]) * f,
    )


def interpolate_line(start: LatLon, end: LatLon, steps: int) -> List[LatLon]:
    """steps + 1 evenly spaced points from start to end, both included."""
    if steps < 1:
        raise ValueError("steps must be >= 1")
    return [interpolate(start, end, i / steps) for i in range(steps + 1)]
