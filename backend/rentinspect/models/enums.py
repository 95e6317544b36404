"""Enumeration types for the inspection domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user. Assigned at provisioning time and never changed."""
    ADMIN = "admin"
    LANDLORD = "landlord"
    TENANT = "tenant"
    INSPECTOR = "inspector"


class InspectionStatus(str, Enum):
    """Status of an inspection."""
    DRAFT = "draft"
    FINALIZED = "finalized"  # terminal: a report has been generated


class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    PROPERTY_CREATED = "property_created"
    INSPECTION_CREATED = "inspection_created"
    PHOTO_ADDED = "photo_added"
    REPORT_GENERATED = "report_generated"
    INSPECTION_FINALIZED = "inspection_finalized"
