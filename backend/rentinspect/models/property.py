"""Property model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentinspect.core.database import Base

if TYPE_CHECKING:
    from rentinspect.models.user import User
    from rentinspect.models.inspection import Inspection


class Property(Base):
    """A rental property owned by one landlord and occupied by at most one tenant."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    rooms_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Service-layer enforced: must reference a user with role=landlord
    landlord_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    # Service-layer enforced: must reference a user with role=tenant
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    landlord: Mapped[Optional["User"]] = relationship("User", foreign_keys=[landlord_id])
    tenant: Mapped[Optional["User"]] = relationship("User", foreign_keys=[tenant_id])
    inspections: Mapped[list["Inspection"]] = relationship(
        "Inspection", back_populates="property",
        order_by="Inspection.created_at",
    )

    __table_args__ = (
        CheckConstraint("rooms_count >= 0", name="ck_property_rooms_count"),
    )
