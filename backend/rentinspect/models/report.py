"""Report artifact model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, BigInteger, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentinspect.core.database import Base

if TYPE_CHECKING:
    from rentinspect.models.inspection import Inspection


class ReportArtifact(Base):
    """Pointer to the one published report document of an inspection.

    ``source_hash`` is the canonical hash of the inspection data the
    document was rendered from; a matching hash means the stored
    document is still current.
    """

    __tablename__ = "report_artifacts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    inspection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    object_key: Mapped[str] = mapped_column(String(500), nullable=False)
    sha256: Mapped[str] = mapped_column(String(64), nullable=False)
    source_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    inspection: Mapped["Inspection"] = relationship("Inspection", back_populates="report")
