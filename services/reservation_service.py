"""
Reservation planning for proposal lines.

Builds candidate reservation records against a line's quota and hands them
to the external persistence layer. Records are never stored here.
"""

from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence
from uuid import uuid4
import structlog

from models.inventory import DirectionalFace, InventoryItem
from models.reservation import (
    Amounts,
    CompletionStatus,
    Period,
    Quota,
    ReservationFaceType,
    ReservationPlan,
    ReservationRecord,
)
from services.location_service import base_code
from exceptions import (
    ExternalServiceError,
    NoCapacityError,
    QuotaExceededError,
    ReservationNotFoundError,
)

logger = structlog.get_logger(__name__)


# ===================
# QUOTA
# ===================

def count_reserved(records: Iterable[ReservationRecord]) -> Quota:
    """Reserved faces by type."""
    counts = Counter(r.face_type for r in records)
    return Quota(
        flujo=counts[ReservationFaceType.FLUJO],
        contraflujo=counts[ReservationFaceType.CONTRAFLUJO],
        bonificacion=counts[ReservationFaceType.BONIFICACION]
    )


def remaining(quota: Quota, records: Iterable[ReservationRecord]) -> Quota:
    """Faces still to assign, never below zero."""
    reserved = count_reserved(records)
    return Quota(
        flujo=max(0, quota.flujo - reserved.flujo),
        contraflujo=max(0, quota.contraflujo - reserved.contraflujo),
        bonificacion=max(0, quota.bonificacion - reserved.bonificacion)
    )


def completion_status(quota: Quota, records: Iterable[ReservationRecord]) -> CompletionStatus:
    """
    Compare reserved faces against the line's quota.

    A face type is complete when reserved equals required exactly;
    over-assignment needs attention as much as missing faces do.
    """
    reserved = count_reserved(records)
    flujo_diff = reserved.flujo - quota.flujo
    contra_diff = reserved.contraflujo - quota.contraflujo
    bonus_diff = reserved.bonificacion - quota.bonificacion

    return CompletionStatus(
        reserved=reserved,
        required=quota,
        flujo_diff=flujo_diff,
        contraflujo_diff=contra_diff,
        bonificacion_diff=bonus_diff,
        total_diff=reserved.total - quota.total,
        flujo_complete=flujo_diff == 0,
        contraflujo_complete=contra_diff == 0,
        bonificacion_complete=bonus_diff == 0
    )


def detect_pairs(items: Iterable[InventoryItem]) -> set[str]:
    """Base codes with both a Flujo and a Contraflujo face among items."""
    faces: dict[str, set[DirectionalFace]] = {}
    for item in items:
        code = base_code(item.code)
        if code:
            faces.setdefault(code, set()).add(item.directional_face)
    return {
        code for code, found in faces.items()
        if DirectionalFace.FLUJO in found and DirectionalFace.CONTRAFLUJO in found
    }


def _booked_face(item: InventoryItem) -> ReservationFaceType:
    # Anything that is not explicitly Flujo books against the Contraflujo quota
    if item.directional_face == DirectionalFace.FLUJO:
        return ReservationFaceType.FLUJO
    return ReservationFaceType.CONTRAFLUJO


# ===================
# PLANNER
# ===================

class ReservationPlanner:
    """Turns selected inventory into candidate reservation records."""

    def _record(
        self,
        item: InventoryItem,
        face: ReservationFaceType,
        period: Optional[Period],
        rate: Decimal,
        group_id: Optional[str] = None,
    ) -> ReservationRecord:
        return ReservationRecord(
            id=uuid4().hex,
            inventory_item_id=item.id,
            face_type=face,
            period=period,
            group_id=group_id,
            amounts=Amounts(rate=rate),
            code=item.code,
            plaza=item.plaza,
            location=item.location,
            article=item.article,
            furniture_type=item.furniture_type,
            status="Reservado",
            units=item.units,
            position=item.position
        )

    def plan(
        self,
        items: Sequence[InventoryItem],
        quota: Quota,
        existing: Iterable[ReservationRecord] = (),
        period: Optional[Period] = None,
        group_as_complete: bool = False,
        rate: Optional[Decimal] = None,
        as_bonus: bool = False,
    ) -> ReservationPlan:
        """
        Prepare records for the selected items.

        Items are walked in order. A Flujo or Contraflujo record is prepared
        only while that face still has quota left; the rest are skipped.
        Bonus reservations are all-or-nothing.

        Args:
            items: Selected inventory, in priority order
            quota: Faces the proposal line asks for
            existing: Records already booked on the line
            period: Catorcena for the new records
            group_as_complete: Link Flujo + Contraflujo pairs by group_id
            rate: Rate per face; item rate when None, zero for bonus
            as_bonus: Book every item as Bonificacion

        Returns:
            ReservationPlan

        Raises:
            QuotaExceededError: If a bonus request exceeds the remaining bonus
            NoCapacityError: If no record can be prepared
        """
        left = remaining(quota, existing)
        pairs = frozenset(detect_pairs(items))

        if as_bonus:
            if len(items) > left.bonificacion:
                raise QuotaExceededError(
                    ReservationFaceType.BONIFICACION.value,
                    requested=len(items),
                    remaining=left.bonificacion
                )
            records = [
                self._record(item, ReservationFaceType.BONIFICACION, period, Decimal("0"))
                for item in items
            ]
            return self._finish(records, (), pairs=frozenset(), grouped=False)

        # One group id per paired base code, shared by its Flujo and Contraflujo
        group_ids: dict[str, str] = {}
        if group_as_complete:
            group_ids = {code: uuid4().hex for code in pairs}

        budget = {
            ReservationFaceType.FLUJO: left.flujo,
            ReservationFaceType.CONTRAFLUJO: left.contraflujo,
        }
        records: list[ReservationRecord] = []
        skipped: list[str] = []

        for item in items:
            face = _booked_face(item)
            if budget[face] <= 0:
                skipped.append(item.id)
                continue
            budget[face] -= 1
            item_rate = rate if rate is not None else (item.rate or Decimal("0"))
            records.append(self._record(
                item, face, period, item_rate,
                group_id=group_ids.get(base_code(item.code))
            ))

        return self._finish(records, skipped, pairs=pairs, grouped=group_as_complete)

    def _finish(
        self,
        records: list[ReservationRecord],
        skipped: Sequence[str],
        pairs: frozenset[str],
        grouped: bool,
    ) -> ReservationPlan:
        if not records:
            raise NoCapacityError(requested=len(skipped))

        # A group id only means something when both faces made it into the plan
        linked = Counter(r.group_id for r in records if r.group_id)
        for record in records:
            if record.group_id and linked[record.group_id] < 2:
                record.group_id = None

        logger.info(
            "reservation_plan_built",
            records=len(records),
            skipped=len(skipped),
            pairs=len(pairs),
            grouped=grouped
        )
        return ReservationPlan(
            records=tuple(records),
            skipped_ids=tuple(skipped),
            pairs=pairs,
            grouped=grouped
        )


# ===================
# INDEX
# ===================

class ReservationIndex:
    """
    Lookup of reservation records by id and by group id.

    Removing a record never touches its sibling: the sibling keeps its
    group_id, which simply resolves to no partner any more.
    """

    def __init__(self, records: Iterable[ReservationRecord] = ()):
        self._by_id: dict[str, ReservationRecord] = {}
        self._by_group: dict[str, list[str]] = {}
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._by_id

    def __iter__(self):
        return iter(self._by_id.values())

    def add(self, record: ReservationRecord) -> None:
        if record.id in self._by_id:
            self.remove(record.id)
        self._by_id[record.id] = record
        if record.group_id:
            self._by_group.setdefault(record.group_id, []).append(record.id)

    def get(self, record_id: str) -> ReservationRecord:
        """
        Raises:
            ReservationNotFoundError: If record_id is unknown
        """
        record = self._by_id.get(record_id)
        if record is None:
            raise ReservationNotFoundError(record_id)
        return record

    def siblings(self, record_id: str) -> list[ReservationRecord]:
        """Other records sharing the record's group id."""
        record = self.get(record_id)
        if not record.group_id:
            return []
        return [
            self._by_id[rid] for rid in self._by_group.get(record.group_id, [])
            if rid != record_id
        ]

    def remove(self, record_id: str) -> ReservationRecord:
        record = self.get(record_id)
        del self._by_id[record_id]
        if record.group_id:
            members = self._by_group.get(record.group_id, [])
            if record_id in members:
                members.remove(record_id)
            if not members:
                self._by_group.pop(record.group_id, None)
        return record

    def by_period(self) -> dict[Optional[Period], list[ReservationRecord]]:
        """Records per catorcena, in insertion order."""
        result: dict[Optional[Period], list[ReservationRecord]] = {}
        for record in self._by_id.values():
            result.setdefault(record.period, []).append(record)
        return result


# ===================
# PERSISTENCE BOUNDARY
# ===================

class ReservationSink(Protocol):
    """External persistence for reservation records."""

    def create(self, records: Sequence[ReservationRecord]) -> None: ...

    def update(self, record: ReservationRecord) -> None: ...

    def delete(self, record_id: str) -> None: ...


class ReservationService:
    """Planning plus hand-off to the persistence layer."""

    def __init__(self):
        self.planner = ReservationPlanner()

    def submit(self, plan: ReservationPlan, sink: ReservationSink) -> int:
        """
        Send planned records to the sink.

        Returns:
            Number of records created

        Raises:
            ExternalServiceError: If the sink fails
        """
        try:
            sink.create(list(plan.records))
        except Exception as e:
            logger.error("reservation_submit_failed", records=len(plan.records), error=str(e))
            raise ExternalServiceError("reservations", str(e))

        logger.info("reservations_submitted", records=len(plan.records))
        return len(plan.records)


# Singleton instance for convenience
_reservation_service: Optional[ReservationService] = None


def get_reservation_service() -> ReservationService:
    """Get or create ReservationService instance."""
    global _reservation_service
    if _reservation_service is None:
        _reservation_service = ReservationService()
    return _reservation_service
