"""API Routers for RentInspect."""

from rentinspect.routers.auth import router as auth_router
from rentinspect.routers.properties import router as properties_router
from rentinspect.routers.inspections import router as inspections_router

__all__ = [
    "auth_router",
    "properties_router",
    "inspections_router",
]
