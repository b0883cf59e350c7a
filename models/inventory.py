"""
Inventory schemas: display units and the annotations derived from them.

InventoryItem is owned by the inventory provider. Everything else in this
module is derived and never written back.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import SnapshotSchema
from models.geo import Position


class DirectionalFace(str, Enum):
    """Traffic direction a display face points to."""
    FLUJO = "Flujo"
    CONTRAFLUJO = "Contraflujo"
    COMPLETO = "Completo"          # Both directions at one site
    BONIFICACION = "Bonificacion"  # Bonus face, no direction
    NONE = "none"


class InventoryItem(SnapshotSchema):
    """
    One display unit as supplied by the inventory provider.

    Required: id
    Optional: everything else (position is absent for non-geolocated units)
    """

    id: str = Field(..., min_length=1, description="Inventory identifier")
    code: Optional[str] = Field(None, description="Unique code, e.g. 'PB-0412_Flujo'")
    position: Optional[Position] = Field(None, description="Site coordinates")
    directional_face: DirectionalFace = Field(
        default=DirectionalFace.NONE,
        description="Stored face type"
    )
    already_reserved_elsewhere: bool = Field(
        default=False,
        description="Reserved for another proposal line"
    )
    plaza: Optional[str] = Field(None, description="City / market")
    location: Optional[str] = Field(None, description="Street location")
    furniture_type: Optional[str] = Field(None, description="Furniture format")
    article: Optional[str] = Field(None, description="Catalog article")
    socioeconomic_level: Optional[str] = Field(None, description="NSE segment")
    units: int = Field(default=1, ge=0, description="Faces counted by this unit")
    rate: Optional[Decimal] = Field(None, ge=0, description="Public rate per face")


class LocationFlags(SnapshotSchema):
    """Which directional faces exist at one location key."""

    has_flujo: bool = False
    has_contraflujo: bool = False

    @property
    def is_complete(self) -> bool:
        return self.has_flujo and self.has_contraflujo


class CompletePair(SnapshotSchema):
    """
    Read-only view of a Flujo + Contraflujo pair at one site.

    Both records stay distinct; the pair only references them.
    """

    base_code: str
    flujo_id: str
    contraflujo_id: str
    already_reserved: bool = False


class DistanceGroup(SnapshotSchema):
    """Items kept at least a minimum distance apart from each other."""

    name: str
    item_ids: tuple[str, ...]
    positioned: bool = True


class MarkerState(str, Enum):
    """Display/priority state of an item on the map, highest priority first."""
    SELECTED = "selected"
    ALREADY_RESERVED = "already_reserved"
    OUT_OF_RANGE = "out_of_range"
    # By face type
    COMPLETE = "complete"
    CONTRAFLUJO = "contraflujo"
    FLUJO = "flujo"


# ===================
# API SCHEMAS
# ===================

class LocationGroupsRequest(SnapshotSchema):
    """Items to group by rounded coordinates."""

    items: list[InventoryItem]


class LocationGroupEntry(SnapshotSchema):
    """Flags of one location key."""

    key: str
    has_flujo: bool
    has_contraflujo: bool


class ItemDisplayFace(SnapshotSchema):
    """Stored and derived face of one item."""

    id: str
    location_key: Optional[str] = None
    stored_face: DirectionalFace
    display_face: DirectionalFace


class LocationGroupsResponse(SnapshotSchema):
    """Location flags plus per-item derived faces."""

    locations: list[LocationGroupEntry]
    items: list[ItemDisplayFace]


class DistanceGroupsRequest(SnapshotSchema):
    """Items to spread into distance groups."""

    items: list[InventoryItem]
    group_size: Optional[int] = Field(None, ge=1, description="Max items per group")
    min_distance_m: Optional[float] = Field(None, ge=0, description="Min meters between members")


class DistanceGroupsResponse(SnapshotSchema):
    """Distance groups in creation order."""

    data: list[DistanceGroup]
    total: int
