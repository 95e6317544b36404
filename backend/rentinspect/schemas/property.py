"""Property schemas."""

from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from rentinspect.schemas.base import BaseSchema, MutableRecordResponse, ShortText


class PropertyCreate(BaseSchema):
    """Create a new property.

    ``landlord_email`` is required when an admin creates the property and
    ignored for landlords, who always own what they create.
    """

    address: ShortText
    rooms_count: int = Field(default=0, ge=0)
    amenities: Optional[str] = None
    landlord_email: Optional[EmailStr] = None
    tenant_email: Optional[EmailStr] = None


class PropertyResponse(MutableRecordResponse):
    """Property response."""

    address: str
    rooms_count: int
    amenities: Optional[str] = None
    landlord_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
