"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, SnapshotSchema
from models.geo import Position, Zone, ZoneOrigin
from models.inventory import (
    DirectionalFace,
    InventoryItem,
    LocationFlags,
    CompletePair,
    DistanceGroup,
    MarkerState,
)
from models.proximity import ProximityResult
from models.reservation import (
    Period,
    ReservationFaceType,
    Amounts,
    ReservationRecord,
    Quota,
    CompletionStatus,
    ReservationPlan,
    ReservationSummary,
)
from models.report import (
    FilterOperator,
    FieldCondition,
    GroupAggregate,
    ReportGroup,
    ReportNode,
)

__all__ = [
    # Base
    "BaseSchema",
    "SnapshotSchema",

    # Geo
    "Position",
    "Zone",
    "ZoneOrigin",
    "ProximityResult",

    # Inventory
    "DirectionalFace",
    "InventoryItem",
    "LocationFlags",
    "CompletePair",
    "DistanceGroup",
    "MarkerState",

    # Reservations
    "Period",
    "ReservationFaceType",
    "Amounts",
    "ReservationRecord",
    "Quota",
    "CompletionStatus",
    "ReservationPlan",
    "ReservationSummary",

    # Reports
    "FilterOperator",
    "FieldCondition",
    "GroupAggregate",
    "ReportGroup",
    "ReportNode",
]
