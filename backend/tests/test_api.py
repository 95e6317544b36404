"""HTTP tests against the FastAPI app with a per-test database and stores.

Bearer tokens are the user's email; token verification is stubbed so the
real actor resolution path runs against the test database.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from rentinspect.core import security
from rentinspect.core.database import get_db
from rentinspect.main import create_app
from rentinspect.routers.deps import get_report_store_dep, get_upload_receiver_dep
from rentinspect.services.locks import get_inspection_locks


@pytest.fixture
def app(session_factory, report_store, upload_receiver, locks, monkeypatch):
    monkeypatch.setattr(
        security,
        "verify_session_token",
        lambda token: {"uid": f"test-{token}", "email": token, "email_verified": True},
    )

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_store_dep] = lambda: report_store
    app.dependency_overrides[get_upload_receiver_dep] = lambda: upload_receiver
    app.dependency_overrides[get_inspection_locks] = lambda: locks
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def auth(email):
    return {"Authorization": f"Bearer {email}"}


def jpeg(name="room.jpg"):
    return {"file": (name, b"\xff\xd8\xff\xe0fake-jpeg", "image/jpeg")}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestAuth:
    async def test_missing_token_is_unauthorized(self, client, users):
        response = await client.get("/v1/me")
        assert response.status_code == 401

    async def test_unprovisioned_user_is_unauthorized(self, client, users):
        response = await client.get("/v1/me", headers=auth("stranger@demo.com"))
        assert response.status_code == 401

    async def test_me(self, client, users):
        response = await client.get("/v1/me", headers=auth("tenant@demo.com"))
        assert response.status_code == 200
        assert response.json()["role"] == "tenant"


class TestProperties:
    async def test_landlord_creates_and_lists(self, client, users):
        response = await client.post(
            "/v1/properties",
            json={"address": "3 Quay Road", "rooms_count": 2},
            headers=auth("landlord@demo.com"),
        )
        assert response.status_code == 201
        assert response.json()["landlord_id"] == str(users["landlord"].id)

        listed = await client.get("/v1/properties", headers=auth("landlord@demo.com"))
        assert [p["address"] for p in listed.json()] == ["3 Quay Road"]

    async def test_tenant_cannot_create(self, client, users):
        response = await client.post(
            "/v1/properties",
            json={"address": "3 Quay Road"},
            headers=auth("tenant@demo.com"),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    async def test_admin_needs_landlord(self, client, users):
        response = await client.post(
            "/v1/properties",
            json={"address": "3 Quay Road"},
            headers=auth("admin@demo.com"),
        )
        assert response.status_code == 422
        assert response.json()["error"] == "InvalidAssignment"

    async def test_hidden_and_missing_look_the_same(self, client, users, rental):
        hidden = await client.get(f"/v1/properties/{rental.id}", headers=auth("other.tenant@demo.com"))
        missing = await client.get(
            "/v1/properties/00000000-0000-4000-8000-000000000000",
            headers=auth("other.tenant@demo.com"),
        )
        assert hidden.status_code == missing.status_code == 404
        assert hidden.json() == missing.json()


class TestInspectionFlow:
    async def test_inspection_photos_and_report(self, client, users, rental, upload_dir):
        inspector = auth("inspector@demo.com")

        created = await client.post(
            f"/v1/properties/{rental.id}/inspections",
            json={"title": "Move-in", "summary": "Good condition"},
            headers=inspector,
        )
        assert created.status_code == 201
        inspection_id = created.json()["id"]
        assert created.json()["status"] == "draft"

        for room, comment in [("Kitchen", "c1"), ("Bath", "c2"), ("Kitchen", "c3")]:
            response = await client.post(
                f"/v1/inspections/{inspection_id}/photos",
                data={"room": room, "comment": comment},
                files=jpeg(),
                headers=inspector,
            )
            assert response.status_code == 201

        grouped = await client.get(f"/v1/inspections/{inspection_id}/photos", headers=auth("tenant@demo.com"))
        assert [(g["room"], [p["comment"] for p in g["photos"]]) for g in grouped.json()] == [
            ("Bath", ["c2"]),
            ("Kitchen", ["c1", "c3"]),
        ]

        first = await client.post(f"/v1/inspections/{inspection_id}/report", headers=auth("landlord@demo.com"))
        second = await client.post(f"/v1/inspections/{inspection_id}/report", headers=auth("tenant@demo.com"))
        assert first.status_code == second.status_code == 200
        assert first.json()["rebuilt"] is True
        assert second.json()["rebuilt"] is False
        assert first.json()["sha256"] == second.json()["sha256"]

        pdf = await client.get(f"/v1/inspections/{inspection_id}/report.pdf", headers=auth("tenant@demo.com"))
        assert pdf.status_code == 200
        assert pdf.headers["content-type"] == "application/pdf"
        assert pdf.content.startswith(b"%PDF")

        stored_before = sorted((upload_dir / "photos").iterdir())
        assert len(stored_before) == 3
        closed = await client.post(
            f"/v1/inspections/{inspection_id}/photos",
            data={"room": "Hall"},
            files=jpeg(),
            headers=inspector,
        )
        assert closed.status_code == 409
        assert closed.json()["error"] == "InspectionClosed"
        assert sorted((upload_dir / "photos").iterdir()) == stored_before

        detail = await client.get(f"/v1/inspections/{inspection_id}", headers=inspector)
        assert detail.json()["status"] == "finalized"

    async def test_tenant_cannot_upload(self, client, users, inspection):
        response = await client.post(
            f"/v1/inspections/{inspection.id}/photos",
            data={"room": "Kitchen"},
            files=jpeg(),
            headers=auth("tenant@demo.com"),
        )
        assert response.status_code == 403

    async def test_unsupported_file_type(self, client, users, inspection):
        response = await client.post(
            f"/v1/inspections/{inspection.id}/photos",
            data={"room": "Kitchen"},
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth("inspector@demo.com"),
        )
        assert response.status_code == 400

    async def test_report_of_hidden_inspection(self, client, users, inspection, report_dir):
        response = await client.post(
            f"/v1/inspections/{inspection.id}/report",
            headers=auth("other.landlord@demo.com"),
        )
        assert response.status_code == 404
        assert not report_dir.exists() or list(report_dir.rglob("*.pdf")) == []
