import math
from typing import Any

from .collection import Collection

EARTH_RADIUS_KM = 6371


def collect(items: Any = None) -> Collection:
    """Shortcut for Collection.make(items)."""
    return Collection.make(items)


def sum_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two latitude/longitude points (haversine).

    Examples:
        >>> round(sum_distance(48.8566, 2.3522, 51.5074, -0.1278))
        344
    """
    lat1, lon1, lat2, lon2 = map(math.radians, (lat1, lon1, lat2, lon2))
    diff_lat = lat2 - lat1
    diff_lon = lon2 - lon1
    a = math.sin(diff_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(diff_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
