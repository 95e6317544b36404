"""
Shared fixtures for the RentInspect test suite.

Every test gets its own SQLite database file (aiosqlite driver) with the
full schema created from the models, plus a report directory and upload
directory under pytest's tmp_path.
"""

import os

# Settings are read on first import of the app; provide the required ones
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("FIREBASE_PROJECT_ID", "rentinspect-test")
os.environ.setdefault("DEBUG", "true")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from rentinspect.core.database import Base
from rentinspect.models import Inspection, Photo, Property, User
from rentinspect.models.enums import InspectionStatus, UserRole
from rentinspect.services.locks import InspectionLocks
from rentinspect.services.record_store import RecordStore
from rentinspect.services.report_compiler import ReportCompiler
from rentinspect.services.storage import LocalStorage
from rentinspect.services.uploads import UploadReceiver


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rentinspect.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return RecordStore(db)


# =============================================================================
# USERS AND RECORDS
# =============================================================================

@pytest.fixture
async def users(db):
    """One user per role, plus a second landlord and tenant."""
    created = {
        "admin": User(email="admin@demo.com", role=UserRole.ADMIN, firebase_uid="uid-admin"),
        "landlord": User(email="landlord@demo.com", role=UserRole.LANDLORD, firebase_uid="uid-landlord"),
        "other_landlord": User(email="other.landlord@demo.com", role=UserRole.LANDLORD),
        "tenant": User(email="tenant@demo.com", role=UserRole.TENANT),
        "other_tenant": User(email="other.tenant@demo.com", role=UserRole.TENANT),
        "inspector": User(email="inspector@demo.com", role=UserRole.INSPECTOR),
    }
    db.add_all(created.values())
    await db.commit()
    return created


@pytest.fixture
async def rental(db, users):
    """A property owned by ``landlord`` and occupied by ``tenant``."""
    prop = Property(
        address="12 Harbour Street",
        rooms_count=3,
        landlord_id=users["landlord"].id,
        tenant_id=users["tenant"].id,
        created_by_id=users["admin"].id,
    )
    db.add(prop)
    await db.commit()
    return prop


@pytest.fixture
async def other_rental(db, users):
    prop = Property(
        address="7 Mill Lane",
        rooms_count=2,
        landlord_id=users["other_landlord"].id,
        tenant_id=users["other_tenant"].id,
        created_by_id=users["admin"].id,
    )
    db.add(prop)
    await db.commit()
    return prop


@pytest.fixture
async def inspection(db, users, rental):
    """A draft move-in inspection on ``rental``."""
    record = Inspection(
        property_id=rental.id,
        inspector_user_id=users["inspector"].id,
        title="Move-in",
        summary="Clean throughout.",
        status=InspectionStatus.DRAFT,
    )
    db.add(record)
    await db.commit()
    return record


@pytest.fixture
def add_photos(db, users):
    """Insert photos directly, in the given order: ``[(room, comment), ...]``."""

    async def _add(inspection, rows):
        photos = []
        for ordinal, (room, comment) in enumerate(rows):
            photo = Photo(
                inspection_id=inspection.id,
                uploaded_by_id=users["inspector"].id,
                room=room,
                comment=comment,
                filename=f"photo-{ordinal}.jpg",
                content_type="image/jpeg",
                ordinal=ordinal,
            )
            db.add(photo)
            photos.append(photo)
        await db.commit()
        return photos

    return _add


# =============================================================================
# STORAGE AND COMPILER
# =============================================================================

@pytest.fixture
def report_dir(tmp_path):
    return tmp_path / "reports"


@pytest.fixture
def report_store(report_dir):
    return LocalStorage(str(report_dir))


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def photo_store(upload_dir):
    return LocalStorage(str(upload_dir))


@pytest.fixture
def upload_receiver(photo_store):
    return UploadReceiver(photo_store, max_size_bytes=1024 * 1024)


@pytest.fixture
def locks():
    return InspectionLocks()


@pytest.fixture
def compiler(store, report_store, locks):
    return ReportCompiler(store, report_store, locks=locks, lock_timeout=5.0, storage_timeout=5.0)
