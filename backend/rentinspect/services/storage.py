"""Object storage with provider interface (local disk / GCS / S3).

Report documents and uploaded photos go through the same providers,
selected by ``STORAGE_PROVIDER``. Every provider publishes atomically:
readers see either no object or the complete object, never a partially
written one.
"""

import asyncio
import contextlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rentinspect.core.config import Settings, StorageProvider, get_settings

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class StorageInterface(ABC):
    """Abstract interface for storage providers."""

    @abstractmethod
    async def publish(self, object_key: str, data: bytes, content_type: str = PDF_MIME_TYPE) -> None:
        """Durably and atomically store ``data`` under ``object_key``."""

    @abstractmethod
    async def exists(self, object_key: str) -> bool:
        """Whether a published object exists."""

    @abstractmethod
    async def read(self, object_key: str) -> bytes:
        """Read a published object."""

    @abstractmethod
    async def delete(self, object_key: str) -> None:
        """Remove an object. Deleting a missing object is not an error."""


class LocalStorage(StorageInterface):
    """Filesystem provider: write to a temp file, fsync, then rename into place."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def path_for(self, object_key: str) -> Path:
        path = (self.root / object_key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Object key escapes the storage root: {object_key}")
        return path

    def _write_atomic(self, object_key: str, data: bytes) -> None:
        path = self.path_for(object_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        self._fsync_dir(path.parent)

    @staticmethod
    def _fsync_dir(directory: Path) -> None:
        # Persist the rename itself; not supported on every platform
        if not hasattr(os, "O_DIRECTORY"):
            return
        dir_fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)

    def _unlink(self, object_key: str) -> None:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(self.path_for(object_key))

    async def publish(self, object_key: str, data: bytes, content_type: str = PDF_MIME_TYPE) -> None:
        await asyncio.to_thread(self._write_atomic, object_key, data)
        logger.debug(f"[STORAGE] Published {object_key} ({len(data)} bytes) under {self.root}")

    async def exists(self, object_key: str) -> bool:
        return await asyncio.to_thread(self.path_for(object_key).is_file)

    async def read(self, object_key: str) -> bytes:
        return await asyncio.to_thread(self.path_for(object_key).read_bytes)

    async def delete(self, object_key: str) -> None:
        await asyncio.to_thread(self._unlink, object_key)


class GCSStorage(StorageInterface):
    """Google Cloud Storage provider. Single-request uploads are atomic per object."""

    def __init__(self, bucket_name: str, project_id: Optional[str] = None):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client = None

    @property
    def client(self):
        if self._client is None:
            from google.cloud import storage
            self._client = storage.Client(project=self.project_id)
        return self._client

    @property
    def bucket(self):
        return self.client.bucket(self.bucket_name)

    async def publish(self, object_key: str, data: bytes, content_type: str = PDF_MIME_TYPE) -> None:
        blob = self.bucket.blob(object_key)
        await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)

    async def exists(self, object_key: str) -> bool:
        blob = self.bucket.blob(object_key)
        return await asyncio.to_thread(blob.exists)

    async def read(self, object_key: str) -> bytes:
        blob = self.bucket.blob(object_key)
        return await asyncio.to_thread(blob.download_as_bytes)

    async def delete(self, object_key: str) -> None:
        from google.api_core.exceptions import NotFound

        blob = self.bucket.blob(object_key)
        try:
            await asyncio.to_thread(blob.delete)
        except NotFound:
            pass


class S3Storage(StorageInterface):
    """AWS S3 provider. PutObject never exposes a partial object."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self._client = None
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key

    @property
    def client(self):
        if self._client is None:
            import boto3
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
            )
        return self._client

    async def publish(self, object_key: str, data: bytes, content_type: str = PDF_MIME_TYPE) -> None:
        await asyncio.to_thread(
            self.client.put_object,
            Bucket=self.bucket_name,
            Key=object_key,
            Body=data,
            ContentType=content_type,
        )

    async def exists(self, object_key: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket_name, Key=object_key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    async def read(self, object_key: str) -> bytes:
        response = await asyncio.to_thread(
            self.client.get_object, Bucket=self.bucket_name, Key=object_key
        )
        return await asyncio.to_thread(response["Body"].read)

    async def delete(self, object_key: str) -> None:
        # DeleteObject succeeds for missing keys
        await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket_name, Key=object_key)


def get_storage(settings: Optional[Settings] = None, local_root: Optional[str] = None) -> StorageInterface:
    """Factory function to get the storage provider based on config.

    ``local_root`` is the directory used by the local provider; remote
    providers keep everything in the configured bucket, separated by key
    prefix.
    """
    settings = settings or get_settings()
    if settings.storage_provider == StorageProvider.GCS:
        return GCSStorage(
            bucket_name=settings.bucket_name,
            project_id=settings.gcs_project_id,
        )
    if settings.storage_provider == StorageProvider.S3:
        return S3Storage(
            bucket_name=settings.bucket_name,
            region=settings.aws_region or "us-east-1",
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return LocalStorage(local_root or settings.report_dir)


def get_report_store(settings: Optional[Settings] = None) -> StorageInterface:
    """Storage for published report documents."""
    settings = settings or get_settings()
    return get_storage(settings, local_root=settings.report_dir)


def get_photo_store(settings: Optional[Settings] = None) -> StorageInterface:
    """Storage for uploaded photo evidence."""
    settings = settings or get_settings()
    return get_storage(settings, local_root=settings.upload_dir)
