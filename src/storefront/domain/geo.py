from __future__ import annotations

import math

SEARCH_RADIUS = 30.0


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Planar Euclidean distance. Coordinates are grid units, not degrees."""
    t1 = (lat1 - lat2) * (lat1 - lat2)
    t2 = (lon1 - lon2) * (lon1 - lon2)
    return math.sqrt(t1 + t2)


def within_radius(d: float, radius: float = SEARCH_RADIUS) -> bool:
    return d <= radius
