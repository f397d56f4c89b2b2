"""
Geographic and temporal proximity helpers.
"""

import math
from datetime import datetime
from typing import Optional

from .models import Location

EARTH_RADIUS_KM = 6371.0

# Distance at which the normalized proximity saturates
MAX_PROXIMITY_KM = 10.0

RECENCY_WINDOW_DAYS = 7
RECENCY_BONUS = 0.1


def haversine_km(a: Location, b: Location) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)

    h = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def distance_km(a: Optional[Location], b: Optional[Location]) -> Optional[float]:
    if a is None or b is None:
        return None
    return haversine_km(a, b)


def normalized_distance(a: Optional[Location], b: Optional[Location]) -> float:
    """
    Distance mapped to [0, 1]: 0 at the same point, 1 at or beyond 10 km.

    A missing location on either side counts as maximum distance.
    """
    d = distance_km(a, b)
    if d is None:
        return 1.0
    return min(d / MAX_PROXIMITY_KM, 1.0)


def days_between(t1: Optional[datetime], t2: Optional[datetime]) -> Optional[float]:
    if t1 is None or t2 is None:
        return None
    return abs((t1 - t2).total_seconds()) / 86400.0


def recency_bonus(t1: Optional[datetime],
                  t2: Optional[datetime],
                  bonus: float = RECENCY_BONUS,
                  window_days: float = RECENCY_WINDOW_DAYS) -> float:
    days = days_between(t1, t2)
    if days is None or days > window_days:
        return 0.0
    return bonus
