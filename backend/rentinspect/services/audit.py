"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rentinspect.models.audit import AuditLog
from rentinspect.models.enums import AuditAction


class AuditService:
    """Service for creating audit log entries.

    Entries join the caller's transaction; they are committed together
    with the mutation they describe.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        user_id: Optional[UUID] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            details=details or {},
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_property_created(
        self,
        property_id: UUID,
        user_id: UUID,
        landlord_id: UUID,
        tenant_id: Optional[UUID],
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.PROPERTY_CREATED,
            resource_type="property",
            resource_id=property_id,
            user_id=user_id,
            details={
                "landlord_id": str(landlord_id),
                "tenant_id": str(tenant_id) if tenant_id else None,
            },
        )

    async def log_inspection_created(
        self,
        inspection_id: UUID,
        property_id: UUID,
        user_id: UUID,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.INSPECTION_CREATED,
            resource_type="inspection",
            resource_id=inspection_id,
            user_id=user_id,
            details={"property_id": str(property_id)},
        )

    async def log_photo_added(
        self,
        photo_id: UUID,
        inspection_id: UUID,
        user_id: UUID,
        room: str,
        filename: str,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.PHOTO_ADDED,
            resource_type="photo",
            resource_id=photo_id,
            user_id=user_id,
            details={
                "inspection_id": str(inspection_id),
                "room": room,
                "filename": filename,
            },
        )

    async def log_report_generated(
        self,
        inspection_id: UUID,
        user_id: UUID,
        object_key: str,
        sha256: str,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.REPORT_GENERATED,
            resource_type="inspection",
            resource_id=inspection_id,
            user_id=user_id,
            details={"object_key": object_key, "sha256": sha256},
        )

    async def log_inspection_finalized(
        self,
        inspection_id: UUID,
        user_id: UUID,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.INSPECTION_FINALIZED,
            resource_type="inspection",
            resource_id=inspection_id,
            user_id=user_id,
        )
