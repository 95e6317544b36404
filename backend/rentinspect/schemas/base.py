"""Shared schema configuration, field types and response bases."""

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints

# Labels drop surrounding whitespace; free text (summary, comment) is kept verbatim
RoomLabel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class BaseSchema(BaseModel):
    """Base schema; reads straight from ORM objects."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
    )


class RecordResponse(BaseSchema):
    """Fields every persisted record exposes."""

    id: UUID
    created_at: datetime


class MutableRecordResponse(RecordResponse):
    """Records that can change after creation (status, assignments)."""

    updated_at: Optional[datetime] = None
