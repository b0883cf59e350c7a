"""
Proximity schemas: zone membership results and the map marker API.
"""

from pydantic import Field

from models.base import SnapshotSchema
from models.geo import Zone
from models.inventory import InventoryItem, DirectionalFace, MarkerState


class ProximityResult(SnapshotSchema):
    """
    Zone membership of positioned items.

    active is False when no zones were given; both sets are then empty and
    no item is treated as out of range.
    """

    in_range: frozenset[str] = Field(default_factory=frozenset)
    out_of_range: frozenset[str] = Field(default_factory=frozenset)
    active: bool = False


# ===================
# API SCHEMAS
# ===================

class ClassifyRequest(SnapshotSchema):
    """Items and zones to classify."""

    items: list[InventoryItem]
    zones: list[Zone] = Field(default_factory=list)


class ClassifyResponse(SnapshotSchema):
    """Zone membership, ids sorted for stable output."""

    active: bool
    in_range: list[str]
    out_of_range: list[str]


class MarkerRequest(SnapshotSchema):
    """Items, zones and the ids currently selected."""

    items: list[InventoryItem]
    zones: list[Zone] = Field(default_factory=list)
    selected_ids: list[str] = Field(default_factory=list)


class MarkerEntry(SnapshotSchema):
    """Resolved marker of one item."""

    id: str
    state: MarkerState
    color: str
    display_face: DirectionalFace


class MarkerResponse(SnapshotSchema):
    """Markers in input order."""

    data: list[MarkerEntry]
    total: int
