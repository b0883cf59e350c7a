"""
Report schemas: grouped views of inventory and reservations.

Groups are transient. They are rebuilt on every call and never persisted.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import Field

from models.base import SnapshotSchema
from models.inventory import InventoryItem
from models.reservation import ReservationRecord

ReportMember = Union[ReservationRecord, InventoryItem]


class FilterOperator(str, Enum):
    """Operators accepted by field conditions."""
    EQ = "="
    NEQ = "!="
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


class FieldCondition(SnapshotSchema):
    """One advanced-filter condition, e.g. plaza contains 'guadalajara'."""

    field: str = Field(..., min_length=1)
    operator: FilterOperator = FilterOperator.CONTAINS
    value: str = ""


class GroupAggregate(SnapshotSchema):
    """Totals over a group's members."""

    count: int = 0
    total_units: int = 0
    total_investment: Decimal = Decimal("0")


class ReportGroup(SnapshotSchema):
    """Members sharing the same composite key."""

    key: str
    values: tuple[str, ...]
    members: tuple[ReportMember, ...]
    aggregate: GroupAggregate

    @property
    def item_ids(self) -> list[str]:
        return [member.id for member in self.members]


class ReportNode(SnapshotSchema):
    """
    One level of the nested report view.

    key is the composite key down to this level, so the leaves of the tree
    carry exactly the keys of the flat grouping.
    """

    dimension: str
    value: str
    key: str
    aggregate: GroupAggregate
    item_ids: tuple[str, ...]
    children: tuple["ReportNode", ...] = ()


ReportNode.model_rebuild()


# ===================
# API SCHEMAS
# ===================

class GroupReportRequest(SnapshotSchema):
    """Reservations plus grouping, filter and sort options."""

    records: list[ReservationRecord]
    dimensions: list[str] = Field(default_factory=lambda: ["period", "article"])
    filter_text: Optional[str] = Field(None, max_length=200)
    conditions: list[FieldCondition] = Field(default_factory=list)
    sort_field: Optional[str] = None
    descending: bool = False


class GroupReportResponse(SnapshotSchema):
    """Flat groups in first-seen order plus the nested view."""

    data: list[ReportGroup]
    tree: list[ReportNode]
    total_groups: int
    total_items: int


class SummaryRequest(SnapshotSchema):
    """Reservations to summarize."""

    records: list[ReservationRecord]
