"""Report and actor schemas."""

from datetime import datetime
from uuid import UUID

from rentinspect.schemas.base import BaseSchema
from rentinspect.models.enums import UserRole


class ReportArtifactRef(BaseSchema):
    """Reference to a published inspection report."""

    inspection_id: UUID
    object_key: str
    sha256: str
    size_bytes: int
    created_at: datetime
    rebuilt: bool = False


class ActorResponse(BaseSchema):
    """The authenticated user."""

    id: UUID
    email: str
    role: UserRole
