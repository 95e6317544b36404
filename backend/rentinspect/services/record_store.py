"""Record store: the persistence interface handed to every core component.

Wraps one AsyncSession. Components receive the store explicitly; nothing
in the core reaches for a process-wide session or connection.
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentinspect.models.inspection import Inspection, Photo
from rentinspect.models.property import Property
from rentinspect.models.report import ReportArtifact
from rentinspect.models.user import User


class RecordStore:
    """CRUD and filtered list operations on the inspection records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- users -------------------------------------------------------------

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.firebase_uid == firebase_uid)
        )
        return result.scalar_one_or_none()

    # --- properties --------------------------------------------------------

    async def get_property(self, property_id: UUID) -> Optional[Property]:
        return await self.db.get(Property, property_id)

    async def list_properties(self, scope: ColumnElement[bool]) -> list[Property]:
        result = await self.db.execute(
            select(Property).where(scope).order_by(Property.address, Property.created_at)
        )
        return list(result.scalars().all())

    # --- inspections -------------------------------------------------------

    async def get_inspection(self, inspection_id: UUID) -> Optional[Inspection]:
        """Load an inspection with its owning property, always fresh from the database."""
        result = await self.db.execute(
            select(Inspection)
            .options(selectinload(Inspection.property))
            .where(Inspection.id == inspection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_inspections(
        self,
        scope: ColumnElement[bool],
        property_id: Optional[UUID] = None,
    ) -> list[Inspection]:
        query = select(Inspection).where(scope)
        if property_id:
            query = query.where(Inspection.property_id == property_id)
        query = query.order_by(Inspection.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # --- photos ------------------------------------------------------------

    async def list_photos(self, inspection_id: UUID) -> list[Photo]:
        result = await self.db.execute(
            select(Photo)
            .where(Photo.inspection_id == inspection_id)
            .order_by(Photo.ordinal)
        )
        return list(result.scalars().all())

    async def count_photos(self, inspection_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Photo.id)).where(Photo.inspection_id == inspection_id)
        )
        return result.scalar() or 0

    async def next_photo_ordinal(self, inspection_id: UUID) -> int:
        result = await self.db.execute(
            select(func.max(Photo.ordinal)).where(Photo.inspection_id == inspection_id)
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    # --- report artifacts --------------------------------------------------

    async def get_report_artifact(self, inspection_id: UUID) -> Optional[ReportArtifact]:
        result = await self.db.execute(
            select(ReportArtifact)
            .where(ReportArtifact.inspection_id == inspection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # --- unit of work ------------------------------------------------------

    async def add(self, record: Any) -> Any:
        """Stage a new record and flush so its defaults (id, timestamps) are populated."""
        self.db.add(record)
        await self.db.flush()
        return record

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
