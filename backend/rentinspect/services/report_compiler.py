"""
Report compiler: turns an inspection into its published PDF report.

get_or_build is idempotent. Under a per-inspection lock it compares the
canonical hash of the current inspection data with the hash recorded for
the published artifact; a match that is still present in the store is
returned as-is, anything else is rendered and published again.

A build only reports success after the PDF is fully written, flushed and
atomically published, and its record committed. A failed build leaves no
partial artifact behind.
"""

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from rentinspect.core.exceptions import SourceDataUnavailable, StorageWriteFailed
from rentinspect.models.inspection import Inspection, Photo
from rentinspect.models.report import ReportArtifact
from rentinspect.models.user import User
from rentinspect.schemas.report import ReportArtifactRef
from rentinspect.services.audit import AuditService
from rentinspect.services.canonical import compute_source_hash
from rentinspect.services.lifecycle import RoomPhotos, finalize, group_photos_by_room
from rentinspect.services.locks import InspectionLocks, get_inspection_locks
from rentinspect.services.pdf_generator import PDFGenerator, get_pdf_generator
from rentinspect.services.record_store import RecordStore
from rentinspect.services.storage import StorageInterface
from rentinspect.services.visibility import require_visible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedReport:
    """A rendered, not yet published, report."""
    pdf: bytes
    sha256: str
    source_hash: str


def build_report_data(inspection: Inspection, groups: Sequence[RoomPhotos]) -> Dict[str, Any]:
    """Plain data the PDF generator renders; detached from the ORM session."""
    return {
        "inspection_id": str(inspection.id),
        "address": inspection.property.address,
        "title": inspection.title,
        "inspection_date": inspection.inspection_date,
        "summary": inspection.summary,
        "rooms": [
            {
                "room": group.room,
                "photos": [
                    {"comment": p.comment, "filename": p.filename}
                    for p in group.photos
                ],
            }
            for group in groups
        ],
    }


class ReportCompiler:
    """Get-or-build for inspection reports."""

    def __init__(
        self,
        store: RecordStore,
        report_store: StorageInterface,
        locks: Optional[InspectionLocks] = None,
        pdf_generator: Optional[PDFGenerator] = None,
        lock_timeout: float = 60.0,
        storage_timeout: float = 30.0,
        key_prefix: str = "reports",
    ):
        self.store = store
        self.report_store = report_store
        self.locks = locks if locks is not None else get_inspection_locks()
        self.pdf_generator = pdf_generator if pdf_generator is not None else get_pdf_generator()
        self.lock_timeout = lock_timeout
        self.storage_timeout = storage_timeout
        self.key_prefix = key_prefix.strip("/")
        self.audit = AuditService(store.db)

    def object_key_for(self, inspection_id: UUID) -> str:
        return f"{self.key_prefix}/inspection-{inspection_id}.pdf"

    async def _load_inspection(self, inspection_id: UUID) -> Optional[Inspection]:
        try:
            return await self.store.get_inspection(inspection_id)
        except SQLAlchemyError as e:
            logger.error(f"[REPORT] Could not read inspection {inspection_id}: {e}")
            raise SourceDataUnavailable(details={"inspection_id": str(inspection_id)}) from e

    async def _load_photos(self, inspection_id: UUID) -> list[Photo]:
        try:
            return await self.store.list_photos(inspection_id)
        except SQLAlchemyError as e:
            logger.error(f"[REPORT] Could not read photos of inspection {inspection_id}: {e}")
            raise SourceDataUnavailable(details={"inspection_id": str(inspection_id)}) from e

    async def _storage_call(self, awaitable, action: str, object_key: str):
        """Run a report store call bounded by the storage timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.storage_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[REPORT] Timed out after {self.storage_timeout}s during {action} of {object_key}")
            raise StorageWriteFailed(
                f"Report storage timed out during {action}",
                details={"object_key": object_key},
            ) from e
        except Exception as e:
            logger.error(f"[REPORT] Storage {action} failed for {object_key}: {e}")
            raise StorageWriteFailed(
                f"Report storage {action} failed",
                details={"object_key": object_key},
            ) from e

    async def render(self, inspection: Inspection, photos: Sequence[Photo]) -> RenderedReport:
        """Render the PDF in memory. Deterministic for identical input."""
        groups = group_photos_by_room(photos)
        if inspection.property is None:
            raise SourceDataUnavailable(
                "Inspection has no readable property",
                details={"inspection_id": str(inspection.id)},
            )
        source_hash = compute_source_hash(inspection, groups)
        try:
            pdf = await asyncio.to_thread(
                self.pdf_generator.generate_inspection_report,
                build_report_data(inspection, groups),
            )
        except Exception as e:
            logger.error(f"[REPORT] Could not render inspection {inspection.id}: {e}")
            raise SourceDataUnavailable(
                "Report could not be rendered",
                details={"inspection_id": str(inspection.id)},
            ) from e
        return RenderedReport(
            pdf=pdf,
            sha256=hashlib.sha256(pdf).hexdigest(),
            source_hash=source_hash,
        )

    async def build_report(
        self,
        actor: User,
        inspection: Inspection,
        photos: Sequence[Photo],
    ) -> ReportArtifact:
        """Render, publish and record the report, then finalize the inspection.

        Callers must hold the inspection's lock.
        """
        rendered = await self.render(inspection, photos)
        object_key = self.object_key_for(inspection.id)

        await self._storage_call(
            self.report_store.publish(object_key, rendered.pdf),
            "publish",
            object_key,
        )

        try:
            artifact = await self.store.get_report_artifact(inspection.id)
            if artifact is None:
                artifact = ReportArtifact(inspection_id=inspection.id)
                self.store.db.add(artifact)
            artifact.object_key = object_key
            artifact.sha256 = rendered.sha256
            artifact.source_hash = rendered.source_hash
            artifact.size_bytes = len(rendered.pdf)
            await self.store.db.flush()

            await self.audit.log_report_generated(
                inspection_id=inspection.id,
                user_id=actor.id,
                object_key=object_key,
                sha256=rendered.sha256,
            )
            if finalize(inspection):
                await self.audit.log_inspection_finalized(inspection_id=inspection.id, user_id=actor.id)
            await self.store.commit()
        except SQLAlchemyError as e:
            await self.store.rollback()
            logger.error(f"[REPORT] Could not record report for inspection {inspection.id}: {e}")
            raise StorageWriteFailed(
                "Report record could not be saved",
                details={"object_key": object_key},
            ) from e

        logger.info(
            f"[REPORT] Published {object_key} ({len(rendered.pdf)} bytes, sha256 {rendered.sha256[:12]})"
        )
        return artifact

    async def get_or_build(self, actor: User, inspection_id: UUID) -> ReportArtifactRef:
        """Return the current report of an inspection, building it if needed.

        Raises:
            NotVisible: the inspection is missing or hidden from the actor
            SourceDataUnavailable: inspection or photos could not be read or rendered
            StorageWriteFailed: the artifact could not be stored in time
        """
        inspection = await self._load_inspection(inspection_id)
        require_visible(actor, inspection, "Inspection")

        async with self.locks.hold(inspection_id, self.lock_timeout):
            # Re-read under the lock; another builder may have just finished
            inspection = await self._load_inspection(inspection_id)
            if inspection is None:
                raise SourceDataUnavailable(details={"inspection_id": str(inspection_id)})
            photos = await self._load_photos(inspection_id)
            groups = group_photos_by_room(photos)

            artifact = await self.store.get_report_artifact(inspection_id)
            if artifact is not None and artifact.source_hash == compute_source_hash(inspection, groups):
                present = await self._storage_call(
                    self.report_store.exists(artifact.object_key),
                    "lookup",
                    artifact.object_key,
                )
                if present:
                    if finalize(inspection):
                        await self.audit.log_inspection_finalized(inspection_id=inspection.id, user_id=actor.id)
                        await self.store.commit()
                    logger.debug(f"[REPORT] Reusing {artifact.object_key}")
                    return self._ref(artifact, rebuilt=False)
                logger.warning(f"[REPORT] Recorded artifact {artifact.object_key} is missing, rebuilding")

            artifact = await self.build_report(actor, inspection, photos)
            return self._ref(artifact, rebuilt=True)

    async def open_artifact(self, actor: User, inspection_id: UUID) -> bytes:
        """Get-or-build, then read the published PDF."""
        ref = await self.get_or_build(actor, inspection_id)
        return await self._storage_call(
            self.report_store.read(ref.object_key),
            "read",
            ref.object_key,
        )

    @staticmethod
    def _ref(artifact: ReportArtifact, rebuilt: bool) -> ReportArtifactRef:
        return ReportArtifactRef(
            inspection_id=artifact.inspection_id,
            object_key=artifact.object_key,
            sha256=artifact.sha256,
            size_bytes=artifact.size_bytes,
            created_at=artifact.created_at,
            rebuilt=rebuilt,
        )
