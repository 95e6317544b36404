"""RentInspect - property inspections with per-room photo evidence and PDF reports."""

__version__ = "1.0.0"
