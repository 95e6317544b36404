"""Inspection operations: creation, photo intake and grouped reads."""

import logging
from typing import Optional
from uuid import UUID

from rentinspect.models.enums import InspectionStatus
from rentinspect.models.inspection import Inspection, Photo
from rentinspect.models.user import User
from rentinspect.schemas.inspection import InspectionCreate, PhotoCreate, UploadHandle
from rentinspect.services.audit import AuditService
from rentinspect.services.lifecycle import RoomPhotos, ensure_open, group_photos_by_room
from rentinspect.services.locks import InspectionLocks, get_inspection_locks
from rentinspect.services.record_store import RecordStore
from rentinspect.services.visibility import (
    Permission,
    inspection_scope,
    require_permission,
    require_visible,
)

logger = logging.getLogger(__name__)


class InspectionService:
    """Inspection operations exposed to the presentation layer."""

    def __init__(
        self,
        store: RecordStore,
        locks: Optional[InspectionLocks] = None,
        lock_timeout: float = 60.0,
    ):
        self.store = store
        self.locks = locks if locks is not None else get_inspection_locks()
        self.lock_timeout = lock_timeout
        self.audit = AuditService(store.db)

    async def list_visible_inspections(
        self,
        actor: User,
        property_id: Optional[UUID] = None,
    ) -> list[Inspection]:
        """Inspections the actor may see, newest first.

        Filtering by a property the actor cannot see raises NotVisible.
        """
        if property_id is not None:
            prop = await self.store.get_property(property_id)
            require_visible(actor, prop, "Property")
        return await self.store.list_inspections(inspection_scope(actor), property_id)

    async def get_inspection_if_visible(self, actor: User, inspection_id: UUID) -> Inspection:
        inspection = await self.store.get_inspection(inspection_id)
        require_visible(actor, inspection, "Inspection")
        return inspection

    async def get_grouped_photos(self, actor: User, inspection_id: UUID) -> list[RoomPhotos]:
        """Photos of a visible inspection grouped by room, in report order."""
        await self.get_inspection_if_visible(actor, inspection_id)
        photos = await self.store.list_photos(inspection_id)
        return group_photos_by_room(photos)

    async def create_inspection(
        self,
        actor: User,
        property_id: UUID,
        data: InspectionCreate,
    ) -> Inspection:
        """Create a draft inspection on a property the actor can see.

        Raises:
            Forbidden: the actor's role may not create inspections
            NotVisible: the property is missing or hidden from the actor
        """
        require_permission(actor, Permission.INSPECTION_CREATE)

        prop = await self.store.get_property(property_id)
        require_visible(actor, prop, "Property")

        inspection = Inspection(
            property_id=prop.id,
            inspector_user_id=actor.id,
            title=data.title,
            summary=data.summary,
            inspection_date=data.inspection_date,
            status=InspectionStatus.DRAFT,
        )
        await self.store.add(inspection)
        await self.audit.log_inspection_created(
            inspection_id=inspection.id,
            property_id=prop.id,
            user_id=actor.id,
        )
        await self.store.commit()

        logger.info(f"[INSPECTION] {actor.email} created inspection {inspection.id} on property {prop.id}")
        return inspection

    async def add_photo(
        self,
        actor: User,
        inspection_id: UUID,
        data: PhotoCreate,
        upload: UploadHandle,
    ) -> Photo:
        """Attach an uploaded photo to a draft inspection.

        Runs under the inspection's lock so it cannot interleave with a
        report build: a photo either makes it into the report snapshot or
        is rejected because the inspection was finalized.

        Raises:
            Forbidden: the actor's role may not add photos
            NotVisible: the inspection is missing or hidden from the actor
            InspectionClosed: the inspection is finalized
            StorageWriteFailed: the inspection stayed busy past the lock timeout
        """
        require_permission(actor, Permission.PHOTO_CREATE)

        async with self.locks.hold(inspection_id, self.lock_timeout):
            inspection = await self.store.get_inspection(inspection_id)
            require_visible(actor, inspection, "Inspection")
            ensure_open(inspection)

            photo = Photo(
                inspection_id=inspection.id,
                uploaded_by_id=actor.id,
                room=data.room,
                comment=data.comment,
                filename=upload.filename,
                content_type=upload.content_type,
                ordinal=await self.store.next_photo_ordinal(inspection.id),
            )
            await self.store.add(photo)
            await self.audit.log_photo_added(
                photo_id=photo.id,
                inspection_id=inspection.id,
                user_id=actor.id,
                room=photo.room,
                filename=photo.filename,
            )
            await self.store.commit()

        logger.info(f"[INSPECTION] Photo {photo.id} added to {inspection.id} ({photo.room})")
        return photo
