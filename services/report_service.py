"""
Report grouping of reserved inventory.

Groups are a partition of the (filtered) input: every member lands in
exactly one group, and the group key depends only on field values. Keys are
the dimension values joined in the order the dimensions are given, with
separator characters escaped inside each value, so reordering dimensions
changes keys but never the total member count.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence, Union
import structlog

from config import settings
from models.reservation import Period, ReservationFaceType, ReservationSummary
from models.report import (
    FieldCondition,
    FilterOperator,
    GroupAggregate,
    ReportGroup,
    ReportMember,
    ReportNode,
)
from services.selection_service import SelectionSet
from utils.text_utils import clean_label, normalize_search_text
from exceptions import UnknownDimensionError

logger = structlog.get_logger(__name__)

Predicate = Callable[[ReportMember], bool]
SortKey = Callable[[ReportMember], Any]

# Key of the single group produced when no dimension is active
ALL_ITEMS_KEY = "Todos"

# Fields searched by the free-text filter
DEFAULT_SEARCH_FIELDS = ("code", "plaza", "location", "furniture_type", "article")


# ===================
# DIMENSIONS
# ===================

@dataclass(frozen=True)
class GroupingDimension:
    """A named, pure key-extraction function."""
    name: str
    label: str
    extract: Callable[[ReportMember], Optional[str]]


def field_text(member: ReportMember, field: str) -> Optional[str]:
    """String form of a member field, None when missing or blank."""
    value = getattr(member, field, None)
    if isinstance(value, Enum):
        value = value.value
    elif isinstance(value, Period):
        value = value.label
    return clean_label(value)


def _attr(field: str) -> Callable[[ReportMember], Optional[str]]:
    def extract(member: ReportMember) -> Optional[str]:
        return field_text(member, field)
    return extract


def _period(member: ReportMember) -> Optional[str]:
    period = getattr(member, "period", None)
    return period.label if period is not None else None


def _article(member: ReportMember) -> Optional[str]:
    article = clean_label(getattr(member, "article", None))
    return article.upper() if article else None


def _face_type(member: ReportMember) -> Optional[str]:
    face = getattr(member, "face_type", None) or getattr(member, "directional_face", None)
    if face is None or face.value == "none":
        return None
    return face.value


DIMENSIONS: dict[str, GroupingDimension] = {
    d.name: d for d in (
        GroupingDimension("period", "Inicio Periodo", _period),
        GroupingDimension("article", "Artículo", _article),
        GroupingDimension("plaza", "Plaza", _attr("plaza")),
        GroupingDimension("face_type", "Tipo de Cara", _face_type),
        GroupingDimension("status", "Estatus", _attr("status")),
        GroupingDimension("furniture_type", "Formato", _attr("furniture_type")),
    )
}


def get_dimension(name: str) -> GroupingDimension:
    """
    Look up a registered dimension.

    Raises:
        UnknownDimensionError: If name is not registered
    """
    try:
        return DIMENSIONS[name]
    except KeyError:
        raise UnknownDimensionError(name, list(DIMENSIONS))


def toggle_dimension(
    active: Sequence[str],
    name: str,
    max_active: Optional[int] = None,
) -> list[str]:
    """
    Grouping-chip toggle.

    Removes name if active, otherwise appends it; when max_active is
    reached the oldest dimension is dropped to make room.
    """
    get_dimension(name)
    if name in active:
        return [d for d in active if d != name]
    result = list(active) + [name]
    if max_active is not None and len(result) > max_active:
        result = result[len(result) - max_active:]
    return result


# ===================
# FILTERS & SORTING
# ===================

def text_filter(text: Optional[str], fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> Predicate:
    """
    Accent- and case-insensitive substring match over fields.

    Empty text matches everything.
    """
    needle = normalize_search_text(text)

    def predicate(member: ReportMember) -> bool:
        if not needle:
            return True
        return any(
            needle in normalize_search_text(field_text(member, f))
            for f in fields
        )
    return predicate


def _as_number(value: Any) -> Optional[Decimal]:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _matches(member: ReportMember, condition: FieldCondition) -> bool:
    raw = getattr(member, condition.field, None)
    op = condition.operator

    # Missing values only satisfy the negative operators
    if raw is None:
        return op in (FilterOperator.NEQ, FilterOperator.NOT_CONTAINS)

    value = normalize_search_text(field_text(member, condition.field))
    wanted = normalize_search_text(condition.value)

    if op == FilterOperator.EQ:
        return value == wanted
    if op == FilterOperator.NEQ:
        return value != wanted
    if op == FilterOperator.CONTAINS:
        return wanted in value
    if op == FilterOperator.NOT_CONTAINS:
        return wanted not in value

    left, right = _as_number(raw), _as_number(condition.value)
    if left is None or right is None:
        return False
    if op == FilterOperator.GT:
        return left > right
    if op == FilterOperator.LT:
        return left < right
    if op == FilterOperator.GTE:
        return left >= right
    return left <= right


def condition_filter(conditions: Sequence[FieldCondition]) -> Predicate:
    """Predicate matching members that satisfy every condition."""
    conditions = list(conditions)

    def predicate(member: ReportMember) -> bool:
        return all(_matches(member, c) for c in conditions)
    return predicate


def all_of(*predicates: Optional[Predicate]) -> Predicate:
    """Combine predicates with AND, ignoring None."""
    active = [p for p in predicates if p is not None]

    def predicate(member: ReportMember) -> bool:
        return all(p(member) for p in active)
    return predicate


def field_sort_key(field: str) -> SortKey:
    """Sort key comparing a field as normalized text, blanks first."""
    def key(member: ReportMember) -> str:
        return normalize_search_text(field_text(member, field))
    return key


# ===================
# SERVICE
# ===================

DimensionRef = Union[str, GroupingDimension]


class ReportService:
    """
    Hierarchical grouping of report members.

    Members are InventoryItem or ReservationRecord instances; all
    extraction goes through field names they share.
    """

    def __init__(self):
        self.separator = settings.group_key_separator
        self.unassigned = settings.unassigned_label
        # Separator characters escaped inside values so distinct value
        # tuples never join to the same key
        self._escaped = [c for c in dict.fromkeys(self.separator.strip() or self.separator) if c != "\\"]

    def _key(self, values: Sequence[str]) -> str:
        parts = []
        for value in values:
            value = value.replace("\\", "\\\\")
            for char in self._escaped:
                value = value.replace(char, "\\" + char)
            parts.append(value)
        return self.separator.join(parts)

    def _resolve(self, dimensions: Sequence[DimensionRef]) -> list[GroupingDimension]:
        return [d if isinstance(d, GroupingDimension) else get_dimension(d) for d in dimensions]

    def _value(self, dimension: GroupingDimension, member: ReportMember) -> str:
        value = clean_label(dimension.extract(member))
        return value if value is not None else self.unassigned

    def _prepare(
        self,
        items: Iterable[ReportMember],
        filter_predicate: Optional[Predicate],
        sort_key: Optional[SortKey],
        descending: bool,
    ) -> list[ReportMember]:
        members = [m for m in items if filter_predicate is None or filter_predicate(m)]
        if sort_key is not None:
            members.sort(key=sort_key, reverse=descending)
        return members

    def aggregate(self, members: Sequence[ReportMember]) -> GroupAggregate:
        """Count, units and investment (rate x units)."""
        units = 0
        investment = Decimal("0")
        for m in members:
            units += m.units
            rate = getattr(m, "rate", None) or Decimal("0")
            investment += Decimal(rate) * m.units
        return GroupAggregate(
            count=len(members),
            total_units=units,
            total_investment=investment
        )

    def group(
        self,
        items: Iterable[ReportMember],
        dimensions: Sequence[DimensionRef],
        filter_predicate: Optional[Predicate] = None,
        sort_key: Optional[SortKey] = None,
        descending: bool = False,
    ) -> dict[str, ReportGroup]:
        """
        Group members by the ordered dimensions.

        Args:
            items: Members to group
            dimensions: Dimension names or objects, outermost first
            filter_predicate: Applied before grouping
            sort_key: Sorts the filtered members (stable); affects member
                order inside groups and first-seen group order
            descending: Reverse the sort

        Returns:
            Mapping key -> ReportGroup in first-seen order. Without
            dimensions a single "Todos" group holds every member.
        """
        dims = self._resolve(dimensions)
        members = self._prepare(items, filter_predicate, sort_key, descending)

        buckets: dict[tuple[str, ...], list[ReportMember]] = {}
        for member in members:
            values = tuple(self._value(d, member) for d in dims)
            buckets.setdefault(values, []).append(member)

        groups = {}
        for values, bucket in buckets.items():
            key = self._key(values) if dims else ALL_ITEMS_KEY
            groups[key] = ReportGroup(
                key=key,
                values=values,
                members=tuple(bucket),
                aggregate=self.aggregate(bucket)
            )

        logger.debug(
            "report_grouped",
            dimensions=[d.name for d in dims],
            items=len(members),
            groups=len(groups)
        )
        return groups

    def group_tree(
        self,
        items: Iterable[ReportMember],
        dimensions: Sequence[DimensionRef],
        filter_predicate: Optional[Predicate] = None,
        sort_key: Optional[SortKey] = None,
        descending: bool = False,
    ) -> list[ReportNode]:
        """
        Same partition as group(), nested one level per dimension.

        Every node carries the aggregate and ids of all members below it.
        """
        dims = self._resolve(dimensions)
        members = self._prepare(items, filter_predicate, sort_key, descending)
        if not dims:
            return []
        return self._nodes(members, dims, 0, ())

    def _nodes(
        self,
        members: list[ReportMember],
        dims: list[GroupingDimension],
        depth: int,
        prefix: tuple[str, ...],
    ) -> list[ReportNode]:
        dimension = dims[depth]
        buckets: dict[str, list[ReportMember]] = {}
        for member in members:
            buckets.setdefault(self._value(dimension, member), []).append(member)

        nodes = []
        for value, bucket in buckets.items():
            path = prefix + (value,)
            children = ()
            if depth + 1 < len(dims):
                children = tuple(self._nodes(bucket, dims, depth + 1, path))
            nodes.append(ReportNode(
                dimension=dimension.name,
                value=value,
                key=self._key(path),
                aggregate=self.aggregate(bucket),
                item_ids=tuple(m.id for m in bucket),
                children=children
            ))
        return nodes

    def toggle_group_selection(self, group: ReportGroup, selection: SelectionSet) -> bool:
        """All-or-none selection of a group's members."""
        return selection.toggle_group(group.item_ids)

    def summarize(self, records: Iterable[ReportMember]) -> ReservationSummary:
        """
        Reservation KPIs.

        renta counts paid faces (Flujo + Contraflujo); money_total adds the
        rate of every non-bonus record.
        """
        flujo = contraflujo = bonus = total = 0
        money = Decimal("0")

        for record in records:
            total += 1
            face = getattr(record, "face_type", None)
            if face == ReservationFaceType.BONIFICACION:
                bonus += 1
                continue
            if face == ReservationFaceType.FLUJO:
                flujo += 1
            elif face == ReservationFaceType.CONTRAFLUJO:
                contraflujo += 1
            money += getattr(record, "rate", None) or Decimal("0")

        return ReservationSummary(
            flujo=flujo,
            contraflujo=contraflujo,
            bonificadas=bonus,
            renta=flujo + contraflujo,
            total=total,
            money_total=money
        )


# Singleton instance for convenience
_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    """Get or create ReportService instance."""
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
