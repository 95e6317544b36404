"""Properties router."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from rentinspect.core.security import get_current_actor
from rentinspect.models.user import User
from rentinspect.routers.deps import get_inspection_service, get_property_service
from rentinspect.schemas.inspection import InspectionCreate, InspectionResponse
from rentinspect.schemas.property import PropertyCreate, PropertyResponse
from rentinspect.services.inspections import InspectionService
from rentinspect.services.properties import PropertyService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=List[PropertyResponse])
async def list_properties(
    service: PropertyService = Depends(get_property_service),
    actor: User = Depends(get_current_actor),
):
    """List the properties visible to the current user."""
    return await service.list_visible_properties(actor)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    service: PropertyService = Depends(get_property_service),
    actor: User = Depends(get_current_actor),
):
    """Create a property (admins assign a landlord, landlords own it)."""
    return await service.create_property(actor, data)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    actor: User = Depends(get_current_actor),
):
    return await service.get_property_if_visible(actor, property_id)


@router.get("/{property_id}/inspections", response_model=List[InspectionResponse])
async def list_property_inspections(
    property_id: UUID,
    service: InspectionService = Depends(get_inspection_service),
    actor: User = Depends(get_current_actor),
):
    return await service.list_visible_inspections(actor, property_id=property_id)


@router.post(
    "/{property_id}/inspections",
    response_model=InspectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_inspection(
    property_id: UUID,
    data: InspectionCreate,
    service: InspectionService = Depends(get_inspection_service),
    actor: User = Depends(get_current_actor),
):
    """Create a draft inspection on a property (admins and inspectors)."""
    return await service.create_inspection(actor, property_id, data)
