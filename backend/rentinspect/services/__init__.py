"""Services for RentInspect."""

from rentinspect.services.audit import AuditService
from rentinspect.services.inspections import InspectionService
from rentinspect.services.locks import InspectionLocks, get_inspection_locks
from rentinspect.services.properties import PropertyService
from rentinspect.services.record_store import RecordStore
from rentinspect.services.report_compiler import ReportCompiler
from rentinspect.services.storage import StorageInterface, get_photo_store, get_report_store
from rentinspect.services.uploads import UploadReceiver, get_upload_receiver

__all__ = [
    "AuditService",
    "InspectionService",
    "InspectionLocks",
    "get_inspection_locks",
    "PropertyService",
    "RecordStore",
    "ReportCompiler",
    "StorageInterface",
    "get_photo_store",
    "get_report_store",
    "UploadReceiver",
    "get_upload_receiver",
]
