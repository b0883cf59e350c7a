"""
Reservation schemas: periods, reservation records and assignment planning.

Records are prepared here and handed to the external persistence layer;
this module never stores them.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import BaseSchema, SnapshotSchema
from models.geo import Position


class Period(SnapshotSchema):
    """
    Two-week billing period ("catorcena").

    A year has 26 catorcenas, 27 when the calendar spills over.
    """

    ordinal: int = Field(..., ge=1, le=27, description="Catorcena number within the year")
    year: int = Field(..., ge=2000, le=2100, description="Calendar year")

    @property
    def label(self) -> str:
        return f"Catorcena {self.ordinal}, {self.year}"


class ReservationFaceType(str, Enum):
    """Face type a reservation is booked as."""
    FLUJO = "Flujo"
    CONTRAFLUJO = "Contraflujo"
    BONIFICACION = "Bonificacion"


class Amounts(BaseSchema):
    """Money attached to a reservation."""

    rate: Decimal = Field(default=Decimal("0"), ge=0, description="Rate per face")
    discount: Decimal = Field(default=Decimal("0"), ge=0, description="Discount amount")


class ReservationRecord(BaseSchema):
    """
    Inventory assigned to a proposal line.

    group_id links the Flujo and Contraflujo records created together as a
    complete site. It is a lookup key only: removing one record leaves the
    sibling untouched.
    """

    id: str = Field(..., min_length=1, description="Reservation identifier")
    inventory_item_id: str = Field(..., min_length=1, description="Reserved inventory id")
    face_type: ReservationFaceType = Field(..., description="Booked face type")
    period: Optional[Period] = Field(None, description="Catorcena, None when unassigned")
    group_id: Optional[str] = Field(None, description="Shared by paired records")
    amounts: Amounts = Field(default_factory=Amounts)

    # Mirrored from the reserved inventory for reports
    code: Optional[str] = None
    plaza: Optional[str] = None
    location: Optional[str] = None
    article: Optional[str] = None
    furniture_type: Optional[str] = None
    status: Optional[str] = None
    units: int = Field(default=1, ge=0)
    position: Optional[Position] = None

    @property
    def rate(self) -> Decimal:
        return self.amounts.rate

    @property
    def is_bonus(self) -> bool:
        return self.face_type == ReservationFaceType.BONIFICACION


# ===================
# PLANNING
# ===================

class Quota(SnapshotSchema):
    """Faces a proposal line asks for, by type."""

    flujo: int = Field(default=0, ge=0)
    contraflujo: int = Field(default=0, ge=0)
    bonificacion: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.flujo + self.contraflujo + self.bonificacion


class CompletionStatus(SnapshotSchema):
    """
    Reserved vs required faces of a proposal line.

    Diffs are reserved - required: positive means over-assigned,
    negative means faces still missing.
    """

    reserved: Quota
    required: Quota
    flujo_diff: int
    contraflujo_diff: int
    bonificacion_diff: int
    total_diff: int
    flujo_complete: bool
    contraflujo_complete: bool
    bonificacion_complete: bool

    @property
    def is_complete(self) -> bool:
        return self.flujo_complete and self.contraflujo_complete and self.bonificacion_complete

    @property
    def needs_attention(self) -> bool:
        return bool(self.flujo_diff or self.contraflujo_diff or self.bonificacion_diff)


class ReservationPlan(SnapshotSchema):
    """Candidate records ready for the persistence layer."""

    records: tuple[ReservationRecord, ...]
    skipped_ids: tuple[str, ...] = ()
    pairs: frozenset[str] = Field(default_factory=frozenset)
    grouped: bool = False


class ReservationSummary(SnapshotSchema):
    """Reservation KPIs."""

    flujo: int = 0
    contraflujo: int = 0
    bonificadas: int = 0
    renta: int = 0
    total: int = 0
    money_total: Decimal = Decimal("0")
