"""
Geographic schemas: positions and zones.
"""

import math
from enum import Enum

from pydantic import Field, model_validator

from models.base import SnapshotSchema


class Position(SnapshotSchema):
    """
    Latitude/longitude pair in decimal degrees.

    Not range-checked here: items coming from the inventory provider may
    carry junk coordinates, and those are filtered by is_valid_position()
    before any distance is computed.
    """

    lat: float = Field(..., description="Latitude in decimal degrees")
    lng: float = Field(..., description="Longitude in decimal degrees")


class ZoneOrigin(str, Enum):
    """How a zone was created."""
    SEARCH_RESULT = "search_result"
    MANUAL_PIN = "manual_pin"
    RESOLVED_ADDRESS = "resolved_address"
    IMPORTED_BOUNDARY = "imported_boundary"


class Zone(SnapshotSchema):
    """
    Proximity boundary: a center point plus its own radius.

    Zones are independent; there is no shared radius.
    """

    id: str = Field(..., min_length=1, description="Zone identifier")
    center: Position = Field(..., description="Zone center")
    radius_m: float = Field(..., gt=0, description="Radius in meters")
    label: str = Field(default="", description="Display label")
    origin: ZoneOrigin = Field(
        default=ZoneOrigin.MANUAL_PIN,
        description="Zone source"
    )

    @model_validator(mode="after")
    def center_must_be_finite(self) -> "Zone":
        """A zone without a usable center can never match anything."""
        lat, lng = self.center.lat, self.center.lng
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError("Zone center must have finite coordinates")
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise ValueError("Zone center is outside latitude/longitude bounds")
        if not math.isfinite(self.radius_m):
            raise ValueError("Zone radius must be finite")
        return self
