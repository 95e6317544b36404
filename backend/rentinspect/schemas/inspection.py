"""Inspection and photo schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from rentinspect.schemas.base import (
    BaseSchema,
    MutableRecordResponse,
    RecordResponse,
    RoomLabel,
    ShortText,
)
from rentinspect.models.enums import InspectionStatus


class InspectionCreate(BaseSchema):
    """Create a new inspection (draft status)."""

    title: ShortText
    summary: Optional[str] = None
    inspection_date: Optional[datetime] = None


class InspectionResponse(MutableRecordResponse):
    """Inspection response."""

    property_id: UUID
    inspector_user_id: Optional[UUID] = None
    title: str
    summary: Optional[str] = None
    inspection_date: Optional[datetime] = None
    status: InspectionStatus
    finalized_at: Optional[datetime] = None


class PhotoCreate(BaseSchema):
    """Descriptive fields of a photo; the file itself arrives as an UploadHandle."""

    room: RoomLabel
    comment: Optional[str] = None


class UploadHandle(BaseSchema):
    """What the upload receiver hands back: an opaque storage name and its type."""

    filename: str = Field(..., min_length=1, max_length=500)
    content_type: str = Field(..., pattern=r"^image/.+$")


class PhotoResponse(RecordResponse):
    """Photo response."""

    inspection_id: UUID
    room: str
    filename: str
    content_type: str
    comment: Optional[str] = None
    ordinal: int


class RoomGroup(BaseSchema):
    """Photos of one room, in creation order."""

    room: str
    photos: list[PhotoResponse] = Field(default_factory=list)
