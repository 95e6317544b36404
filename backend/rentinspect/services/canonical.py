"""Canonical JSON of an inspection's report source data.

The hash of this payload decides whether a published report is still
current. It covers only what the report renders; the lifecycle status
is excluded so finalizing an inspection does not invalidate its report.
"""

import hashlib
import json
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from rentinspect.models.inspection import Inspection
from rentinspect.services.lifecycle import RoomPhotos


HEADER_FIELDS = [
    "inspection_id",
    "title",
    "summary",
    "inspection_date",
    "address",
]

PHOTO_FIELDS = [
    "ordinal",
    "filename",
    "comment",
]


def normalize_value(value: Any) -> Any:
    """Normalize a value for canonical JSON.

    Nulls and empty strings are stripped, datetimes become ISO8601 UTC
    at second precision.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        raise ValueError("Floats are not allowed in canonical JSON")
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, UUID):
        return str(value)
    if hasattr(value, "value"):  # Enum
        return value.value
    return value


def extract_whitelist(data: dict, whitelist: list[str]) -> dict:
    """Extract only whitelisted, non-null fields from data."""
    result = {}
    for field in whitelist:
        if field in data:
            normalized = normalize_value(data[field])
            if normalized is not None:
                result[field] = normalized
    return result


def build_canonical_payload(inspection: Inspection, groups: Sequence[RoomPhotos]) -> dict:
    """Build the canonical payload.

    Structure:
    {
        "header": { ... },
        "rooms": [ {"room": "...", "photos": [ ... ]} ]
    }
    """
    header = extract_whitelist(
        {
            "inspection_id": inspection.id,
            "title": inspection.title,
            "summary": inspection.summary,
            "inspection_date": inspection.inspection_date,
            "address": inspection.property.address,
        },
        HEADER_FIELDS,
    )
    rooms = [
        {
            "room": group.room,
            "photos": [
                extract_whitelist(
                    {"ordinal": p.ordinal, "filename": p.filename, "comment": p.comment},
                    PHOTO_FIELDS,
                )
                for p in group.photos
            ],
        }
        for group in groups
    ]
    return {"header": header, "rooms": rooms}


def serialize_canonical(payload: dict) -> str:
    """Sorted keys, no extra whitespace, UTF-8."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_source_hash(inspection: Inspection, groups: Sequence[RoomPhotos]) -> str:
    """SHA-256 of the canonical report source."""
    canonical_json = serialize_canonical(build_canonical_payload(inspection, groups))
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
