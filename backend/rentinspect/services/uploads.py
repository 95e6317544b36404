"""Upload receiver: stores raw photo bytes under a generated name.

Bytes go to the configured storage provider; the core only ever keeps
the returned handle, never the bytes.
"""

import asyncio
import logging
import uuid
from typing import BinaryIO, Optional

from rentinspect.core.config import Settings, get_settings
from rentinspect.schemas.inspection import UploadHandle
from rentinspect.services.storage import StorageInterface, get_photo_store

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/heic": ".heic",
}


class UploadReceiver:
    """Receives photo uploads into object storage."""

    ALLOWED_MIME_TYPES = set(EXTENSIONS)

    def __init__(self, store: StorageInterface, max_size_bytes: int, key_prefix: str = "photos"):
        self.store = store
        self.max_size_bytes = max_size_bytes
        self.key_prefix = key_prefix

    def generate_filename(self, content_type: str) -> str:
        """Generate a unique, opaque storage name."""
        return f"{uuid.uuid4().hex}{EXTENSIONS[content_type]}"

    def key_for(self, handle: UploadHandle) -> str:
        return f"{self.key_prefix}/{handle.filename}"

    def _read_limited(self, stream: BinaryIO) -> bytes:
        chunks = []
        size = 0
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > self.max_size_bytes:
                raise ValueError(
                    f"File size exceeds maximum of {self.max_size_bytes // (1024 * 1024)}MB"
                )
            chunks.append(chunk)
        if size == 0:
            raise ValueError("Uploaded file is empty")
        return b"".join(chunks)

    async def receive_upload(
        self,
        stream: BinaryIO,
        content_type: str,
        original_name: Optional[str] = None,
    ) -> UploadHandle:
        """Store an upload and return its handle.

        Raises:
            ValueError: unsupported type, empty or oversized file
        """
        if content_type not in self.ALLOWED_MIME_TYPES:
            raise ValueError(f"Unsupported mime type: {content_type}")

        data = await asyncio.to_thread(self._read_limited, stream)
        handle = UploadHandle(filename=self.generate_filename(content_type), content_type=content_type)
        await self.store.publish(self.key_for(handle), data, content_type)
        logger.info(f"[UPLOAD] Stored {original_name or 'upload'} as {handle.filename} ({len(data)} bytes)")
        return handle

    async def discard(self, handle: UploadHandle) -> None:
        """Remove a stored upload whose photo record was never created."""
        await self.store.delete(self.key_for(handle))


def get_upload_receiver(settings: Optional[Settings] = None) -> UploadReceiver:
    """Factory function to get the upload receiver based on config."""
    settings = settings or get_settings()
    return UploadReceiver(
        store=get_photo_store(settings),
        max_size_bytes=settings.max_upload_size_mb * 1024 * 1024,
        key_prefix=settings.upload_prefix,
    )
