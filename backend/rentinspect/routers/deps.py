"""Dependency providers wiring the core services into the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentinspect.core.config import Settings, get_settings
from rentinspect.core.database import get_db
from rentinspect.services.inspections import InspectionService
from rentinspect.services.locks import InspectionLocks, get_inspection_locks
from rentinspect.services.properties import PropertyService
from rentinspect.services.record_store import RecordStore
from rentinspect.services.report_compiler import ReportCompiler
from rentinspect.services.storage import StorageInterface, get_report_store
from rentinspect.services.uploads import UploadReceiver, get_upload_receiver


def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_report_store_dep(settings: Settings = Depends(get_settings)) -> StorageInterface:
    return get_report_store(settings)


def get_upload_receiver_dep(settings: Settings = Depends(get_settings)) -> UploadReceiver:
    return get_upload_receiver(settings)


def get_property_service(store: RecordStore = Depends(get_record_store)) -> PropertyService:
    return PropertyService(store)


def get_inspection_service(
    store: RecordStore = Depends(get_record_store),
    locks: InspectionLocks = Depends(get_inspection_locks),
    settings: Settings = Depends(get_settings),
) -> InspectionService:
    return InspectionService(store, locks=locks, lock_timeout=settings.report_lock_timeout_seconds)


def get_report_compiler(
    store: RecordStore = Depends(get_record_store),
    report_store: StorageInterface = Depends(get_report_store_dep),
    locks: InspectionLocks = Depends(get_inspection_locks),
    settings: Settings = Depends(get_settings),
) -> ReportCompiler:
    return ReportCompiler(
        store,
        report_store,
        locks=locks,
        lock_timeout=settings.report_lock_timeout_seconds,
        storage_timeout=settings.storage_timeout_seconds,
        key_prefix=settings.report_prefix,
    )
