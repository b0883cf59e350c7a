"""
Proximity API routes.

Stateless: every request carries its own items, zones and selection.
"""

from fastapi import APIRouter
import structlog

from models.proximity import (
    ClassifyRequest,
    ClassifyResponse,
    MarkerEntry,
    MarkerRequest,
    MarkerResponse,
)
from services.proximity_service import get_proximity_service
from services.classification_service import MARKER_COLORS, get_classification_service
from services.selection_service import SelectionSet
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# ROUTES
# ===================

@router.post("/classify", response_model=ClassifyResponse)
async def classify(request: ClassifyRequest):
    """
    Split positioned items into in-range and out-of-range ids.

    With no zones the result is inactive and both lists are empty.
    """
    try:
        result = get_proximity_service().classify(request.items, request.zones)
        return ClassifyResponse(
            active=result.active,
            in_range=sorted(result.in_range),
            out_of_range=sorted(result.out_of_range)
        )
    except Exception as e:
        return handle_error(e)


@router.post("/markers", response_model=MarkerResponse)
async def markers(request: MarkerRequest):
    """Marker state, color and display face of every item."""
    try:
        selection = SelectionSet(request.selected_ids)
        states = get_classification_service().classify_markers(
            request.items, selection, request.zones
        )
        data = [
            MarkerEntry(id=item_id, state=state, color=MARKER_COLORS[state], display_face=face)
            for item_id, (state, face) in states.items()
        ]
        return MarkerResponse(data=data, total=len(data))
    except Exception as e:
        return handle_error(e)
