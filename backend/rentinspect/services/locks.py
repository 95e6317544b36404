"""Per-inspection mutual exclusion for report builds and photo uploads."""

import asyncio
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator
from uuid import UUID

from rentinspect.core.exceptions import StorageWriteFailed

logger = logging.getLogger(__name__)


class _Slot:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.holders = 0


class InspectionLocks:
    """Registry of asyncio locks keyed by inspection id.

    Entries are dropped once nobody holds or waits on them.
    """

    def __init__(self) -> None:
        self._slots: dict[UUID, _Slot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    @asynccontextmanager
    async def hold(self, inspection_id: UUID, timeout: float) -> AsyncIterator[None]:
        """Hold the lock for ``inspection_id``.

        Raises StorageWriteFailed when the lock is not acquired within
        ``timeout`` seconds.
        """
        slot = self._slots.get(inspection_id)
        if slot is None:
            slot = self._slots[inspection_id] = _Slot()
        slot.holders += 1
        try:
            try:
                await asyncio.wait_for(slot.lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError as e:
                logger.warning(f"[LOCK] Timed out after {timeout}s waiting for inspection {inspection_id}")
                raise StorageWriteFailed(
                    "Inspection is busy, try again later",
                    details={"inspection_id": str(inspection_id)},
                ) from e
            try:
                yield
            finally:
                slot.lock.release()
        finally:
            slot.holders -= 1
            if slot.holders == 0 and self._slots.get(inspection_id) is slot:
                del self._slots[inspection_id]


@lru_cache
def get_inspection_locks() -> InspectionLocks:
    """Process-wide lock registry."""
    return InspectionLocks()
