"""
Distance queries over loaded countries.

Point distances use the haversine formula on a 6371 km sphere. Border
distances approximate point-to-segment distance by sampling each segment at
evenly spaced points (linear in lat/lon) and taking the nearest sample.
"""

import logging
import math
from enum import Enum
from typing import Iterable, List, Tuple

import numpy as np

from countrygeo.config import EARTH_RADIUS_KM, SEGMENT_SAMPLES, TOUCHING_DISTANCE_KM
from countrygeo.models import CountryEntry, GeoPoint, Ring

logger = logging.getLogger(__name__)

# Starting value for a minimum search; larger than any distance on Earth
NO_DISTANCE_KM = 1_000_000.0


class DistanceMode(Enum):
    CENTROID = 'centroid'
    BORDER = 'border'


def point_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometres between two points given in degrees."""
    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) * math.sin(dlat / 2) + \
        math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) * math.sin(dlon / 2)
    h = min(h, 1.0)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _haversine_km(lat: float, lon: float, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Vectorised point_distance from one point to many."""
    lat1 = math.radians(lat)
    lon1 = math.radians(lon)
    lat2 = np.radians(lats)
    lon2 = np.radians(lons)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = np.sin(dlat / 2) * np.sin(dlat / 2) + \
        math.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) * np.sin(dlon / 2)
    h = np.minimum(h, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def _sample_segments(starts: np.ndarray, ends: np.ndarray, samples: int) -> Tuple[np.ndarray, np.ndarray]:
    """Lat/lon arrays of `samples + 1` evenly spaced points on each segment, endpoints included.

    `starts` and `ends` are (N, 2) arrays of (lat, lon).
    """
    t = np.linspace(0.0, 1.0, samples + 1)
    lats = starts[:, 0:1] + t * (ends[:, 0:1] - starts[:, 0:1])
    lons = starts[:, 1:2] + t * (ends[:, 1:2] - starts[:, 1:2])
    return lats.ravel(), lons.ravel()


def segment_distance(point: GeoPoint, start: GeoPoint, end: GeoPoint, samples: int = SEGMENT_SAMPLES) -> float:
    """Approximate distance in km from `point` to the segment start-end."""
    lats, lons = _sample_segments(
        np.array([[start.lat, start.lon]]),
        np.array([[end.lat, end.lon]]),
        samples,
    )
    return float(_haversine_km(point.lat, point.lon, lats, lons).min())


def ring_segments(ring: Ring) -> List[Tuple[GeoPoint, GeoPoint]]:
    """Consecutive-vertex segments, plus the closing segment when the ring has more than two points."""
    points = ring.points
    segments = [(points[i], points[i + 1]) for i in range(len(points) - 1)]
    if len(points) > 2:
        segments.append((points[-1], points[0]))
    return segments


def _boundary_samples(rings: Iterable[Ring], samples: int) -> Tuple[np.ndarray, np.ndarray]:
    segments = [segment for ring in rings for segment in ring_segments(ring)]
    if not segments:
        return np.empty(0), np.empty(0)
    starts = np.array([[s.lat, s.lon] for s, _ in segments], dtype=np.float64)
    ends = np.array([[e.lat, e.lon] for _, e in segments], dtype=np.float64)
    return _sample_segments(starts, ends, samples)


def _nearest_sample_km(point: GeoPoint, lats: np.ndarray, lons: np.ndarray) -> float:
    return float(_haversine_km(point.lat, point.lon, lats, lons).min())


def one_way_border_distance(source: CountryEntry, target: CountryEntry, samples: int = SEGMENT_SAMPLES) -> float:
    """Minimum distance from any vertex of `source` to any segment of `target`.

    Returns as soon as a vertex closer than the touching distance is found.
    """
    lats, lons = _boundary_samples(target.boundary, samples)
    if lats.size == 0:
        return NO_DISTANCE_KM

    best = NO_DISTANCE_KM
    for ring in source.boundary:
        for point in ring.points:
            dist = _nearest_sample_km(point, lats, lons)
            if dist < best:
                best = dist
                if best < TOUCHING_DISTANCE_KM:
                    return best
    return best


def border_distance(a: CountryEntry, b: CountryEntry, samples: int = SEGMENT_SAMPLES) -> float:
    """Border-to-border distance in km between two countries.

    Checks A's vertices against B's segments and then the reverse, since the
    sampling makes the two directions differ slightly. Countries without any
    boundary rings fall back to centroid distance.
    """
    if not a.boundary or not b.boundary:
        logger.warning(f"Missing boundary for '{a.name}' or '{b.name}', using centroid distance.")
        return point_distance(a.centroid, b.centroid)

    forward = one_way_border_distance(a, b, samples)
    if forward < TOUCHING_DISTANCE_KM:
        return forward

    backward = one_way_border_distance(b, a, samples)
    return min(forward, backward)


def country_distance(a: CountryEntry, b: CountryEntry, mode: DistanceMode = DistanceMode.BORDER) -> float:
    if mode is DistanceMode.CENTROID:
        return point_distance(a.centroid, b.centroid)
    return border_distance(a, b)
