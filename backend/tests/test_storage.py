"""Object storage, upload receiver and lock registry tests."""

import asyncio
import io
from uuid import uuid4

import pytest

from rentinspect.core.config import Settings, StorageProvider
from rentinspect.core.exceptions import StorageWriteFailed
from rentinspect.services.locks import InspectionLocks
from rentinspect.services.storage import (
    GCSStorage,
    LocalStorage,
    S3Storage,
    StorageInterface,
    get_photo_store,
    get_report_store,
)
from rentinspect.services.uploads import UploadReceiver, get_upload_receiver


class MemoryStorage(StorageInterface):
    def __init__(self):
        self.objects = {}

    async def publish(self, object_key, data, content_type="application/pdf"):
        self.objects[object_key] = (data, content_type)

    async def exists(self, object_key):
        return object_key in self.objects

    async def read(self, object_key):
        return self.objects[object_key][0]

    async def delete(self, object_key):
        self.objects.pop(object_key, None)


def make_settings(**overrides):
    return Settings(database_url="sqlite+aiosqlite://", firebase_project_id="test", **overrides)


def stored_files(directory):
    if not directory.exists():
        return []
    return sorted(p.relative_to(directory).as_posix() for p in directory.rglob("*") if p.is_file())


class TestLocalStorage:
    async def test_publish_replaces_atomically(self, report_store, report_dir):
        await report_store.publish("reports/a.pdf", b"%PDF-first")
        await report_store.publish("reports/a.pdf", b"%PDF-second")

        assert await report_store.read("reports/a.pdf") == b"%PDF-second"
        # No temp files left next to the published object
        assert [p.name for p in (report_dir / "reports").iterdir()] == ["a.pdf"]

    async def test_exists(self, report_store):
        assert not await report_store.exists("reports/missing.pdf")
        await report_store.publish("reports/present.pdf", b"%PDF")
        assert await report_store.exists("reports/present.pdf")

    async def test_delete_is_idempotent(self, report_store):
        await report_store.publish("reports/gone.pdf", b"%PDF")
        await report_store.delete("reports/gone.pdf")
        await report_store.delete("reports/gone.pdf")
        assert not await report_store.exists("reports/gone.pdf")

    def test_keys_cannot_escape_root(self, report_store):
        with pytest.raises(ValueError):
            report_store.path_for("../outside.pdf")


class TestStorageFactory:
    def test_local_is_default(self, tmp_path):
        settings = make_settings(report_dir=str(tmp_path / "r"), upload_dir=str(tmp_path / "u"))

        reports = get_report_store(settings)
        photos = get_photo_store(settings)

        assert isinstance(reports, LocalStorage)
        assert isinstance(photos, LocalStorage)
        assert reports.root == (tmp_path / "r").resolve()
        assert photos.root == (tmp_path / "u").resolve()

    def test_remote_providers_serve_reports_and_photos(self):
        gcs = make_settings(storage_provider=StorageProvider.GCS, gcs_bucket_name="inspections-bucket")
        s3 = make_settings(storage_provider=StorageProvider.S3, s3_bucket_name="inspections-bucket")

        assert isinstance(get_report_store(gcs), GCSStorage)
        assert isinstance(get_photo_store(gcs), GCSStorage)
        assert isinstance(get_report_store(s3), S3Storage)
        assert isinstance(get_photo_store(s3), S3Storage)
        assert get_photo_store(s3).bucket_name == "inspections-bucket"

    def test_remote_provider_requires_bucket(self):
        with pytest.raises(ValueError):
            get_photo_store(make_settings(storage_provider=StorageProvider.S3))

    def test_upload_receiver_uses_configured_provider(self):
        receiver = get_upload_receiver(make_settings(
            storage_provider=StorageProvider.S3,
            s3_bucket_name="inspections-bucket",
            upload_prefix="evidence",
            max_upload_size_mb=5,
        ))

        assert isinstance(receiver.store, S3Storage)
        assert receiver.key_prefix == "evidence"
        assert receiver.max_size_bytes == 5 * 1024 * 1024


class TestUploadReceiver:
    async def test_stores_bytes_under_opaque_name(self, upload_receiver, photo_store):
        handle = await upload_receiver.receive_upload(io.BytesIO(b"\xff\xd8jpeg"), "image/jpeg", "kitchen.jpg")

        assert handle.content_type == "image/jpeg"
        assert handle.filename.endswith(".jpg")
        assert "kitchen" not in handle.filename
        assert await photo_store.read(f"photos/{handle.filename}") == b"\xff\xd8jpeg"

    async def test_publishes_through_any_provider(self):
        store = MemoryStorage()
        receiver = UploadReceiver(store, max_size_bytes=1024, key_prefix="evidence")

        handle = await receiver.receive_upload(io.BytesIO(b"png-bytes"), "image/png")

        assert store.objects == {f"evidence/{handle.filename}": (b"png-bytes", "image/png")}

    @pytest.mark.parametrize("payload,content_type", [
        (b"%PDF", "application/pdf"),
        (b"", "image/png"),
        (b"x" * (1024 * 1024 + 1), "image/png"),
    ])
    async def test_rejected_uploads_leave_nothing(self, upload_receiver, upload_dir, payload, content_type):
        with pytest.raises(ValueError):
            await upload_receiver.receive_upload(io.BytesIO(payload), content_type)

        assert stored_files(upload_dir) == []

    async def test_discard_removes_object(self, upload_receiver, photo_store):
        handle = await upload_receiver.receive_upload(io.BytesIO(b"png"), "image/png")
        await upload_receiver.discard(handle)
        await upload_receiver.discard(handle)
        assert not await photo_store.exists(f"photos/{handle.filename}")


class TestInspectionLocks:
    async def test_same_inspection_is_serialized(self):
        locks = InspectionLocks()
        inspection_id = uuid4()
        events = []

        async def worker(name):
            async with locks.hold(inspection_id, timeout=1.0):
                events.append(f"{name}:in")
                await asyncio.sleep(0.01)
                events.append(f"{name}:out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (["a:in", "a:out", "b:in", "b:out"], ["b:in", "b:out", "a:in", "a:out"])
        assert len(locks) == 0

    async def test_different_inspections_do_not_block(self):
        locks = InspectionLocks()
        async with locks.hold(uuid4(), timeout=0.05):
            async with locks.hold(uuid4(), timeout=0.05):
                assert len(locks) == 2

    async def test_timeout_raises_storage_write_failed(self):
        locks = InspectionLocks()
        inspection_id = uuid4()
        async with locks.hold(inspection_id, timeout=1.0):
            with pytest.raises(StorageWriteFailed):
                async with locks.hold(inspection_id, timeout=0.05):
                    pass
        assert len(locks) == 0
