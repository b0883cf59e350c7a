"""
Proximity classification of inventory against user zones.

An item is in range when it lies within the radius of ANY zone (union, not
intersection). With no zones the filter is inactive and nothing is out of
range.
"""

from typing import Iterable, Optional, Sequence
import structlog

from models.geo import Zone
from models.inventory import InventoryItem
from models.proximity import ProximityResult
from services.geo_math import distance, is_valid_position, latitude_span_deg

logger = structlog.get_logger(__name__)

# Slack on the latitude prefilter so float rounding never drops a boundary hit
_LAT_SLACK_DEG = 1e-9


class ProximityService:
    """
    Zone membership calculations.

    Stateless: every call works on the snapshot it is given, so it is safe
    to recompute after each zone, selection or filter change.
    """

    def classify(
        self,
        items: Iterable[InventoryItem],
        zones: Sequence[Zone],
    ) -> ProximityResult:
        """
        Split positioned items into in-range and out-of-range id sets.

        Args:
            items: Inventory items (items without a valid position are
                left out of both sets)
            zones: Active zones, each with its own radius

        Returns:
            ProximityResult; inactive with empty sets when zones is empty
        """
        if not zones:
            return ProximityResult()

        # Latitude band per zone: great-circle distance is never shorter
        # than the north-south component, so items outside it can be skipped
        bands = [
            (zone, latitude_span_deg(zone.radius_m) + _LAT_SLACK_DEG)
            for zone in zones
        ]

        in_range: set[str] = set()
        out_of_range: set[str] = set()
        skipped = 0

        for item in items:
            if not is_valid_position(item.position):
                skipped += 1
                continue

            if self._within_any(item, bands):
                in_range.add(item.id)
            else:
                out_of_range.add(item.id)

        logger.debug(
            "proximity_classified",
            zones=len(zones),
            in_range=len(in_range),
            out_of_range=len(out_of_range),
            skipped=skipped
        )

        return ProximityResult(
            in_range=frozenset(in_range),
            out_of_range=frozenset(out_of_range),
            active=True
        )

    def _within_any(self, item: InventoryItem, bands: list[tuple[Zone, float]]) -> bool:
        position = item.position
        for zone, span in bands:
            if abs(position.lat - zone.center.lat) > span:
                continue
            if distance(position, zone.center) <= zone.radius_m:
                return True
        return False

    # ===================
    # RETAIN ACTIONS
    # ===================

    def keep_in_range(self, result: ProximityResult) -> Optional[frozenset[str]]:
        """
        Ids to keep when narrowing the list to items near a zone.

        Returns:
            The in-range ids, or None (keep all) when filtering is inactive
            or no item is in range
        """
        if not result.active or not result.in_range:
            return None
        return result.in_range

    def keep_out_of_range(self, result: ProximityResult) -> Optional[frozenset[str]]:
        """
        Ids to keep when narrowing the list to items away from every zone.

        Returns:
            The out-of-range ids, or None (keep all) when filtering is
            inactive or no item is out of range
        """
        if not result.active or not result.out_of_range:
            return None
        return result.out_of_range


# Singleton instance for convenience
_proximity_service: Optional[ProximityService] = None


def get_proximity_service() -> ProximityService:
    """Get or create ProximityService instance."""
    global _proximity_service
    if _proximity_service is None:
        _proximity_service = ProximityService()
    return _proximity_service
