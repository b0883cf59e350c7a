"""
Custom exceptions module.

All errors derive from AppError and render through AppError.to_dict().
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,

    # Geo
    InvalidCoordinateError,

    # Zones
    ZoneNotFoundError,
    InvalidZoneError,

    # Reports
    UnknownDimensionError,

    # Reservations
    ReservationNotFoundError,
    QuotaExceededError,
    NoCapacityError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",

    # Geo
    "InvalidCoordinateError",

    # Zones
    "ZoneNotFoundError",
    "InvalidZoneError",

    # Reports
    "UnknownDimensionError",

    # Reservations
    "ReservationNotFoundError",
    "QuotaExceededError",
    "NoCapacityError",
]
