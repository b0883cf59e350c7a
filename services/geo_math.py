"""
Great-circle distance between coordinates.

Pure functions. Callers skip invalid positions with is_valid_position()
before calling distance(); distance() itself refuses them.
"""

import math
from typing import Optional

from models.geo import Position
from exceptions import InvalidCoordinateError

EARTH_RADIUS_M = 6371e3  # Mean Earth radius


def _is_coordinate(lat, lng) -> bool:
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


def is_valid_position(position: Optional[Position]) -> bool:
    """
    Check if a position can take part in spatial classification.

    (0, 0) is rejected: the inventory provider uses zeros for units that were
    never geolocated, and no display unit sits in the Gulf of Guinea.

    Args:
        position: Item position, possibly None

    Returns:
        True if the position has finite in-range coordinates
    """
    if position is None:
        return False
    if not _is_coordinate(position.lat, position.lng):
        return False
    return not (position.lat == 0 and position.lng == 0)


def distance(a: Position, b: Position) -> float:
    """
    Haversine distance between two positions.

    Args:
        a: First position
        b: Second position

    Returns:
        Distance in meters

    Raises:
        InvalidCoordinateError: If either position has a missing, NaN,
            infinite or out-of-range coordinate
    """
    for p in (a, b):
        if p is None:
            raise InvalidCoordinateError(None, None)
        if not _is_coordinate(p.lat, p.lng):
            raise InvalidCoordinateError(p.lat, p.lng)

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def latitude_span_deg(meters: float) -> float:
    """Degrees of latitude covered by a north-south distance."""
    return math.degrees(meters / EARTH_RADIUS_M)
