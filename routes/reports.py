"""
Report API routes.
"""

from fastapi import APIRouter
import structlog

from models.reservation import ReservationSummary
from models.report import GroupReportRequest, GroupReportResponse, SummaryRequest
from services.report_service import (
    all_of,
    condition_filter,
    field_sort_key,
    get_report_service,
    text_filter,
)
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/group", response_model=GroupReportResponse)
async def group_report(request: GroupReportRequest):
    """
    Group reservations by the requested dimensions.

    Filters run before grouping; the sort field orders members inside each
    group and the order groups first appear in.
    """
    try:
        service = get_report_service()
        predicate = all_of(
            text_filter(request.filter_text),
            condition_filter(request.conditions) if request.conditions else None,
        )
        sort_key = field_sort_key(request.sort_field) if request.sort_field else None

        options = dict(
            filter_predicate=predicate,
            sort_key=sort_key,
            descending=request.descending
        )
        groups = service.group(request.records, request.dimensions, **options)
        tree = service.group_tree(request.records, request.dimensions, **options)

        return GroupReportResponse(
            data=list(groups.values()),
            tree=tree,
            total_groups=len(groups),
            total_items=sum(g.aggregate.count for g in groups.values())
        )
    except Exception as e:
        return handle_error(e)


@router.post("/summary", response_model=ReservationSummary)
async def summary(request: SummaryRequest):
    """Reservation KPIs: faces by type, paid faces and money total."""
    try:
        return get_report_service().summarize(request.records)
    except Exception as e:
        return handle_error(e)
