"""Inspection lifecycle and room grouping.

An inspection starts as DRAFT and becomes FINALIZED once a report has
been generated for it. The transition is one-way.
"""

from datetime import datetime
from itertools import groupby
from typing import Iterable, NamedTuple, Optional

from rentinspect.core.exceptions import InspectionClosed
from rentinspect.models.enums import InspectionStatus
from rentinspect.models.inspection import Inspection, Photo


class RoomPhotos(NamedTuple):
    room: str
    photos: list[Photo]


def is_open(inspection: Inspection) -> bool:
    return inspection.status != InspectionStatus.FINALIZED


def ensure_open(inspection: Inspection) -> None:
    """Raise InspectionClosed if the inspection no longer accepts photos."""
    if not is_open(inspection):
        raise InspectionClosed(
            "Inspection is finalized and no longer accepts photos",
            details={"inspection_id": str(inspection.id)},
        )


def finalize(inspection: Inspection, at: Optional[datetime] = None) -> bool:
    """Move a draft inspection to FINALIZED.

    Returns True when the status changed, False when it was already final.
    """
    if inspection.status == InspectionStatus.FINALIZED:
        return False
    inspection.status = InspectionStatus.FINALIZED
    inspection.finalized_at = at or datetime.utcnow()
    return True


def sort_photos(photos: Iterable[Photo]) -> list[Photo]:
    """Order photos by room name, then by creation order within the room."""
    return sorted(photos, key=lambda p: (p.room, p.ordinal))


def group_photos_by_room(photos: Iterable[Photo]) -> list[RoomPhotos]:
    """Group photos by room.

    Rooms appear in alphabetical order and photos keep their creation
    order, so identical input always produces identical groups.
    """
    return [
        RoomPhotos(room=room, photos=list(items))
        for room, items in groupby(sort_photos(photos), key=lambda p: p.room)
    ]
