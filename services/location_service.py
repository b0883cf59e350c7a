"""
Co-location analysis of display faces.

Flujo and Contraflujo faces of the same furniture share coordinates. This
module detects those sites and derives annotations from them. It never
merges or edits records: two faces at one site stay two items.
"""

from typing import Iterable, Optional, Sequence
import structlog

from config import settings
from models.geo import Position
from models.inventory import (
    CompletePair,
    DirectionalFace,
    DistanceGroup,
    InventoryItem,
    LocationFlags,
)
from services.geo_math import distance, is_valid_position

logger = structlog.get_logger(__name__)

NO_LOCATION_GROUP = "Sin ubicación"

# Preferred spacing inside a distance group, as a multiple of the minimum
SPACING_TARGET_FACTOR = 1.2


def base_code(code: Optional[str]) -> str:
    """
    Furniture code shared by all faces of one unit.

    "PB-0412_Flujo" -> "PB-0412"
    """
    if not code:
        return ""
    return code.split("_")[0]


class LocationService:
    """Location keys, co-location flags and site-level groupings."""

    def __init__(self):
        self.precision = settings.location_key_precision

    # ===================
    # LOCATION KEYS
    # ===================

    def location_key(self, position: Optional[Position]) -> Optional[str]:
        """
        Rounded-coordinate key; faces with equal keys are treated as one site.

        Returns:
            "lat,lng" with settings.location_key_precision decimals, or None
            when the position is not valid
        """
        if not is_valid_position(position):
            return None
        p = self.precision
        # + 0.0 turns -0.0 into 0.0 so both sides of the equator/meridian agree
        lat = round(position.lat, p) + 0.0
        lng = round(position.lng, p) + 0.0
        return f"{lat:.{p}f},{lng:.{p}f}"

    def group_by_location(self, items: Iterable[InventoryItem]) -> dict[str, LocationFlags]:
        """
        Which directional faces exist at each location.

        Items without a valid position are skipped.
        """
        flags: dict[str, list[bool]] = {}

        for item in items:
            key = self.location_key(item.position)
            if key is None:
                continue
            entry = flags.setdefault(key, [False, False])
            if item.directional_face == DirectionalFace.FLUJO:
                entry[0] = True
            elif item.directional_face == DirectionalFace.CONTRAFLUJO:
                entry[1] = True

        return {
            key: LocationFlags(has_flujo=f, has_contraflujo=c)
            for key, (f, c) in flags.items()
        }

    def derive_display_face(
        self,
        item: InventoryItem,
        groups: dict[str, LocationFlags],
    ) -> DirectionalFace:
        """
        Face used for display.

        Stored Completo is kept. Otherwise an item at a site holding both
        Flujo and Contraflujo displays as Completo. The item itself is not
        changed.
        """
        if item.directional_face == DirectionalFace.COMPLETO:
            return item.directional_face

        key = self.location_key(item.position)
        flags = groups.get(key) if key is not None else None
        if flags is not None and flags.is_complete:
            return DirectionalFace.COMPLETO
        return item.directional_face

    # ===================
    # SITE FILTERS
    # ===================

    def unique_sites(self, items: Iterable[InventoryItem]) -> list[InventoryItem]:
        """Keep the first face of each (base code, location) pair."""
        seen: set[tuple[str, str]] = set()
        result = []
        for item in items:
            key = (base_code(item.code), item.location or "")
            if key in seen:
                continue
            seen.add(key)
            result.append(item)
        return result

    def complete_pairs(self, items: Iterable[InventoryItem]) -> list[CompletePair]:
        """
        Flujo + Contraflujo pairs sharing base code and plaza.

        Items without a code are never paired.
        """
        groups: dict[tuple[str, str], list[InventoryItem]] = {}
        for item in items:
            code = base_code(item.code)
            if not code:
                continue
            groups.setdefault((code, item.plaza or ""), []).append(item)

        pairs = []
        for (code, _), group in groups.items():
            flujo = next((i for i in group if i.directional_face == DirectionalFace.FLUJO), None)
            contra = next((i for i in group if i.directional_face == DirectionalFace.CONTRAFLUJO), None)
            if flujo is None or contra is None:
                continue
            pairs.append(CompletePair(
                base_code=code,
                flujo_id=flujo.id,
                contraflujo_id=contra.id,
                already_reserved=flujo.already_reserved_elsewhere or contra.already_reserved_elsewhere,
            ))
        return pairs

    # ===================
    # DISTANCE GROUPS
    # ===================

    def group_by_distance(
        self,
        items: Sequence[InventoryItem],
        group_size: Optional[int] = None,
        min_distance_m: Optional[float] = None,
    ) -> list[DistanceGroup]:
        """
        Spread items into groups whose members keep a minimum distance.

        Greedy: each group starts with the next unassigned item and takes
        the candidate whose nearest-member distance is at least
        min_distance_m and closest to 1.2 x min_distance_m, until the group
        is full or no candidate qualifies. Items without a valid position
        end up in a trailing "Sin ubicación" group.

        Args:
            items: Items in priority order
            group_size: Maximum members per group (defaults to settings)
            min_distance_m: Minimum spacing in meters (defaults to settings)

        Returns:
            Groups named "Grupo 1".."Grupo N", a partition of items
        """
        size = group_size if group_size is not None else settings.distance_group_size
        min_dist = min_distance_m if min_distance_m is not None else settings.distance_group_min_m
        target = min_dist * SPACING_TARGET_FACTOR

        remaining = [i for i in items if is_valid_position(i.position)]
        unpositioned = [i for i in items if not is_valid_position(i.position)]

        groups: list[list[InventoryItem]] = []
        while remaining:
            group = [remaining.pop(0)]

            while len(group) < size and remaining:
                best_idx = -1
                best_score = float("inf")

                for idx, candidate in enumerate(remaining):
                    nearest = min(distance(candidate.position, m.position) for m in group)
                    if nearest < min_dist:
                        continue
                    score = abs(nearest - target)
                    if score < best_score:
                        best_score = score
                        best_idx = idx

                if best_idx < 0:
                    break
                group.append(remaining.pop(best_idx))

            groups.append(group)

        result = [
            DistanceGroup(name=f"Grupo {n}", item_ids=tuple(i.id for i in group))
            for n, group in enumerate(groups, start=1)
        ]
        if unpositioned:
            result.append(DistanceGroup(
                name=NO_LOCATION_GROUP,
                item_ids=tuple(i.id for i in unpositioned),
                positioned=False,
            ))

        logger.info(
            "distance_groups_built",
            items=len(items),
            groups=len(result),
            group_size=size,
            min_distance_m=min_dist
        )
        return result


# Singleton instance for convenience
_location_service: Optional[LocationService] = None


def get_location_service() -> LocationService:
    """Get or create LocationService instance."""
    global _location_service
    if _location_service is None:
        _location_service = LocationService()
    return _location_service
