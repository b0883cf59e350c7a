"""
Custom exception classes for the application.

Every error carries a stable code, an HTTP status and a details dict so the
API layer can render it with AppError.to_dict().
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "ZONE_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with current state (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# GEO ERRORS
# ===================

class InvalidCoordinateError(ValidationError):
    """Coordinate is missing, NaN, infinite or out of range."""

    def __init__(self, lat: Any, lng: Any):
        super().__init__(
            code="INVALID_COORDINATE",
            message="Coordinates must be finite latitude/longitude values",
            details={"lat": repr(lat), "lng": repr(lng)}
        )


# ===================
# ZONE ERRORS
# ===================

class ZoneNotFoundError(NotFoundError):
    """Zone not found in the session registry."""

    def __init__(self, zone_id: str):
        super().__init__(
            resource="Zone",
            identifier=zone_id,
            code="ZONE_NOT_FOUND"
        )


class InvalidZoneError(ValidationError):
    """Zone definition cannot be used for proximity filtering."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_ZONE",
            message=message,
            details=details
        )


# ===================
# REPORT ERRORS
# ===================

class UnknownDimensionError(ValidationError):
    """Grouping dimension name is not registered."""

    def __init__(self, name: str, valid: list[str]):
        super().__init__(
            code="UNKNOWN_DIMENSION",
            message=f"Unknown grouping dimension: {name}",
            details={"provided": name, "valid": valid}
        )


# ===================
# RESERVATION ERRORS
# ===================

class ReservationNotFoundError(NotFoundError):
    """Reservation record not found."""

    def __init__(self, record_id: str):
        super().__init__(
            resource="Reservation",
            identifier=record_id,
            code="RESERVATION_NOT_FOUND"
        )


class QuotaExceededError(ConflictError):
    """More items requested than the proposal line still allows."""

    def __init__(self, face_type: str, requested: int, remaining: int):
        super().__init__(
            code="QUOTA_EXCEEDED",
            message=f"Only {remaining} {face_type} faces left to assign, {requested} requested",
            details={
                "face_type": face_type,
                "requested": requested,
                "remaining": remaining
            }
        )


class NoCapacityError(ConflictError):
    """No candidate item fits the remaining quota."""

    def __init__(self, requested: int):
        super().__init__(
            code="NO_CAPACITY",
            message="No faces available to reserve",
            details={"requested": requested}
        )
