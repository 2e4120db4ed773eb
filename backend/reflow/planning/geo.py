"""Great-circle distance helpers."""

import math
from collections.abc import Sequence

from backend.reflow.models.common import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates in kilometers.

    Coordinates are assumed valid; range checks happen at model validation.
    """
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def path_length_km(coordinates: Sequence[Coordinate]) -> float:
    """Total distance when visiting coordinates in the given order."""
    return sum(distance_km(a, b) for a, b in zip(coordinates, coordinates[1:]))
