"""Inspection and Photo models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    String, DateTime, ForeignKey, Enum as SQLEnum, Text, Integer, Uuid, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentinspect.core.database import Base
from rentinspect.models.enums import InspectionStatus

if TYPE_CHECKING:
    from rentinspect.models.property import Property
    from rentinspect.models.report import ReportArtifact


class Inspection(Base):
    """An inspection of one property, documented by photos grouped by room."""

    __tablename__ = "inspections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    # Never reassigned after creation
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inspector_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    inspection_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    status: Mapped[InspectionStatus] = mapped_column(
        SQLEnum(InspectionStatus),
        default=InspectionStatus.DRAFT,
        nullable=False,
        index=True,
    )
    finalized_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="inspections")
    photos: Mapped[list["Photo"]] = relationship(
        "Photo", back_populates="inspection", cascade="all, delete-orphan",
        order_by="Photo.ordinal",
    )
    report: Mapped[Optional["ReportArtifact"]] = relationship(
        "ReportArtifact", back_populates="inspection", uselist=False,
        cascade="all, delete-orphan",
    )


class Photo(Base):
    """Photographic evidence attached to an inspection. Immutable once created."""

    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    inspection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    uploaded_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    room: Mapped[str] = mapped_column(String(100), nullable=False)
    # Opaque handle returned by the upload receiver
    filename: Mapped[str] = mapped_column(String(500), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Creation order within the inspection
    ordinal: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    inspection: Mapped["Inspection"] = relationship("Inspection", back_populates="photos")

    __table_args__ = (
        UniqueConstraint("inspection_id", "ordinal", name="uq_photo_inspection_ordinal"),
    )
