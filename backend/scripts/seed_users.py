"""Seed one demo user per role.

Users are matched to Firebase accounts by verified email on first sign-in,
so no Firebase uid is stored here. Safe to run repeatedly.

Usage (from backend/):
    python -m scripts.seed_users
"""

import asyncio

from rentinspect.core.database import dispose_engine, get_session_factory
from rentinspect.core.logging import setup_logging
from rentinspect.models.enums import UserRole
from rentinspect.models.user import User
from rentinspect.services.record_store import RecordStore

DEMO_USERS = [
    ("admin@demo.com", UserRole.ADMIN, "Demo Admin"),
    ("landlord@demo.com", UserRole.LANDLORD, "Demo Landlord"),
    ("tenant@demo.com", UserRole.TENANT, "Demo Tenant"),
    ("inspector@demo.com", UserRole.INSPECTOR, "Demo Inspector"),
]


async def seed_users() -> None:
    async with get_session_factory()() as session:
        store = RecordStore(session)
        for email, role, full_name in DEMO_USERS:
            existing = await store.get_user_by_email(email)
            if existing:
                print(f"User already exists: {email} ({existing.role.value})")
                continue
            await store.add(User(email=email, role=role, full_name=full_name))
            print(f"Created {role.value}: {email}")
        await store.commit()
    await dispose_engine()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_users())
