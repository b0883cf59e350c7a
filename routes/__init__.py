"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.proximity import router as proximity_router
from routes.locations import router as locations_router
from routes.reports import router as reports_router

__all__ = [
    "proximity_router",
    "locations_router",
    "reports_router",
]
