"""SQLAlchemy models for RentInspect."""

from rentinspect.models.user import User
from rentinspect.models.property import Property
from rentinspect.models.inspection import Inspection, Photo
from rentinspect.models.report import ReportArtifact
from rentinspect.models.audit import AuditLog

__all__ = [
    "User",
    "Property",
    "Inspection",
    "Photo",
    "ReportArtifact",
    "AuditLog",
]
