"""
Map marker state of inventory items.

Precedence is fixed and evaluated top-down, first match wins:

    1. selected           - the user picked it
    2. already_reserved   - booked for another proposal line
    3. out_of_range       - zones exist and the item is in none of them
    4. by face type       - complete / contraflujo / flujo

Selection must always dominate reservation conflicts, which dominate
geographic exclusion, which dominates plain type coloring.
"""

from typing import Container, Optional, Sequence
import structlog

from models.geo import Zone
from models.inventory import DirectionalFace, InventoryItem, MarkerState
from models.proximity import ProximityResult
from services.location_service import get_location_service
from services.proximity_service import get_proximity_service

logger = structlog.get_logger(__name__)

MARKER_COLORS: dict[MarkerState, str] = {
    MarkerState.SELECTED: "#facc15",          # Yellow
    MarkerState.ALREADY_RESERVED: "#22c55e",  # Green
    MarkerState.OUT_OF_RANGE: "#6b7280",      # Gray
    MarkerState.COMPLETE: "#a855f7",          # Purple - Flujo + Contraflujo together
    MarkerState.CONTRAFLUJO: "#06b6d4",       # Cyan
    MarkerState.FLUJO: "#3b82f6",             # Blue
}


def resolve_state(
    item: InventoryItem,
    selection: Container[str],
    proximity: ProximityResult,
    display_face: DirectionalFace,
) -> MarkerState:
    """
    Resolve the single marker state of one item.

    Args:
        item: Inventory item
        selection: Selected ids (a SelectionSet or any container)
        proximity: Zone membership for the current zones
        display_face: Face derived by LocationService.derive_display_face

    Returns:
        MarkerState
    """
    if item.id in selection:
        return MarkerState.SELECTED
    if item.already_reserved_elsewhere:
        return MarkerState.ALREADY_RESERVED
    if proximity.active and item.id not in proximity.in_range:
        return MarkerState.OUT_OF_RANGE

    if display_face == DirectionalFace.COMPLETO:
        return MarkerState.COMPLETE
    if display_face == DirectionalFace.CONTRAFLUJO:
        return MarkerState.CONTRAFLUJO
    return MarkerState.FLUJO


class ClassificationService:
    """Resolves marker states for a whole inventory snapshot."""

    def __init__(self):
        self.proximity_service = get_proximity_service()
        self.location_service = get_location_service()

    def classify_markers(
        self,
        items: Sequence[InventoryItem],
        selection: Container[str],
        zones: Sequence[Zone],
        proximity: Optional[ProximityResult] = None,
    ) -> dict[str, tuple[MarkerState, DirectionalFace]]:
        """
        Marker state and display face of every item, in input order.

        Proximity and location flags are computed once per call.

        Args:
            items: Inventory snapshot
            selection: Selected ids
            zones: Current zones
            proximity: Precomputed membership for these zones, if available

        Returns:
            Ordered mapping item id -> (state, display face)
        """
        if proximity is None:
            proximity = self.proximity_service.classify(items, zones)
        groups = self.location_service.group_by_location(items)

        result: dict[str, tuple[MarkerState, DirectionalFace]] = {}
        for item in items:
            face = self.location_service.derive_display_face(item, groups)
            result[item.id] = (resolve_state(item, selection, proximity, face), face)

        logger.debug(
            "markers_classified",
            items=len(items),
            zones=len(zones),
            proximity_active=proximity.active
        )
        return result


# Singleton instance for convenience
_classification_service: Optional[ClassificationService] = None


def get_classification_service() -> ClassificationService:
    """Get or create ClassificationService instance."""
    global _classification_service
    if _classification_service is None:
        _classification_service = ClassificationService()
    return _classification_service
