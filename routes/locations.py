"""
Location API routes.
"""

from fastapi import APIRouter
import structlog

from models.inventory import (
    DistanceGroupsRequest,
    DistanceGroupsResponse,
    ItemDisplayFace,
    LocationGroupEntry,
    LocationGroupsRequest,
    LocationGroupsResponse,
)
from services.location_service import get_location_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/groups", response_model=LocationGroupsResponse)
async def location_groups(request: LocationGroupsRequest):
    """
    Directional faces present at each rounded location.

    Also returns the display face derived for every item; stored faces are
    reported unchanged next to it.
    """
    try:
        service = get_location_service()
        groups = service.group_by_location(request.items)

        locations = [
            LocationGroupEntry(key=key, has_flujo=f.has_flujo, has_contraflujo=f.has_contraflujo)
            for key, f in groups.items()
        ]
        items = [
            ItemDisplayFace(
                id=item.id,
                location_key=service.location_key(item.position),
                stored_face=item.directional_face,
                display_face=service.derive_display_face(item, groups)
            )
            for item in request.items
        ]
        return LocationGroupsResponse(locations=locations, items=items)
    except Exception as e:
        return handle_error(e)


@router.post("/distance-groups", response_model=DistanceGroupsResponse)
async def distance_groups(request: DistanceGroupsRequest):
    """Spread items into groups keeping a minimum distance between members."""
    try:
        groups = get_location_service().group_by_distance(
            request.items,
            group_size=request.group_size,
            min_distance_m=request.min_distance_m
        )
        return DistanceGroupsResponse(data=groups, total=len(groups))
    except Exception as e:
        return handle_error(e)
