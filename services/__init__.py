"""
Business logic services.

Each service handles one domain area.
"""

from services.proximity_service import ProximityService, get_proximity_service
from services.zone_service import ZoneRegistry, PlaceHit
from services.location_service import LocationService, get_location_service, base_code
from services.selection_service import SelectionSet
from services.classification_service import (
    ClassificationService,
    get_classification_service,
    resolve_state,
    MARKER_COLORS,
)
from services.report_service import (
    ReportService,
    get_report_service,
    GroupingDimension,
    DIMENSIONS,
    get_dimension,
    toggle_dimension,
)
from services.reservation_service import (
    ReservationPlanner,
    ReservationIndex,
    ReservationSink,
    ReservationService,
    get_reservation_service,
    completion_status,
    remaining,
    detect_pairs,
)

__all__ = [
    "ProximityService",
    "get_proximity_service",
    "ZoneRegistry",
    "PlaceHit",
    "LocationService",
    "get_location_service",
    "base_code",
    "SelectionSet",
    "ClassificationService",
    "get_classification_service",
    "resolve_state",
    "MARKER_COLORS",
    "ReportService",
    "get_report_service",
    "GroupingDimension",
    "DIMENSIONS",
    "get_dimension",
    "toggle_dimension",
    "ReservationPlanner",
    "ReservationIndex",
    "ReservationSink",
    "ReservationService",
    "get_reservation_service",
    "completion_status",
    "remaining",
    "detect_pairs",
]
