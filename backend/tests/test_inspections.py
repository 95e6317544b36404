"""Inspection service tests: creation, photo intake and room grouping."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from rentinspect.core.exceptions import Forbidden, InspectionClosed, NotVisible, StorageWriteFailed
from rentinspect.models import Inspection
from rentinspect.models.enums import InspectionStatus
from rentinspect.schemas.inspection import InspectionCreate, PhotoCreate, UploadHandle
from rentinspect.services.inspections import InspectionService
from rentinspect.services.lifecycle import finalize, group_photos_by_room
from rentinspect.services.locks import InspectionLocks


@pytest.fixture
def service(store, locks):
    return InspectionService(store, locks=locks, lock_timeout=5.0)


def handle(name="a1b2c3.jpg"):
    return UploadHandle(filename=name, content_type="image/jpeg")


async def count_inspections(db):
    result = await db.execute(select(func.count(Inspection.id)))
    return result.scalar()


class TestCreateInspection:
    async def test_inspector_creates_draft(self, service, users, rental):
        created = await service.create_inspection(
            users["inspector"], rental.id, InspectionCreate(title="Move-in", summary="All good")
        )
        assert created.status == InspectionStatus.DRAFT
        assert created.property_id == rental.id
        assert created.inspector_user_id == users["inspector"].id

    async def test_landlord_is_forbidden(self, service, users, rental):
        with pytest.raises(Forbidden):
            await service.create_inspection(users["landlord"], rental.id, InspectionCreate(title="Nope"))

    async def test_tenant_is_forbidden_on_occupied_property(self, service, db, users, rental):
        with pytest.raises(Forbidden) as exc:
            await service.create_inspection(users["tenant"], rental.id, InspectionCreate(title="My own"))

        assert exc.value.status_code == 403
        assert await count_inspections(db) == 0

    async def test_summary_is_stored_verbatim(self, service, users, rental):
        created = await service.create_inspection(
            users["inspector"], rental.id, InspectionCreate(title="  Move-in  ", summary="  indented\nline  ")
        )
        assert created.title == "Move-in"
        assert created.summary == "  indented\nline  "

    async def test_missing_property_is_not_visible(self, service, users):
        with pytest.raises(NotVisible):
            await service.create_inspection(users["admin"], uuid4(), InspectionCreate(title="Ghost"))


class TestVisibility:
    async def test_tenant_sees_inspections_of_own_property(self, service, users, inspection):
        listed = await service.list_visible_inspections(users["tenant"])
        assert [i.id for i in listed] == [inspection.id]

    async def test_other_tenant_cannot_read_inspection(self, service, users, inspection):
        with pytest.raises(NotVisible):
            await service.get_inspection_if_visible(users["other_tenant"], inspection.id)

    async def test_filtering_by_hidden_property_is_not_visible(self, service, users, rental, inspection):
        with pytest.raises(NotVisible):
            await service.list_visible_inspections(users["other_landlord"], property_id=rental.id)


class TestAddPhoto:
    async def test_photos_are_grouped_by_room_in_creation_order(self, service, users, inspection):
        actor = users["inspector"]
        await service.add_photo(actor, inspection.id, PhotoCreate(room="Kitchen", comment="c1"), handle("1.jpg"))
        await service.add_photo(actor, inspection.id, PhotoCreate(room="Bath", comment="c2"), handle("2.jpg"))
        await service.add_photo(actor, inspection.id, PhotoCreate(room="Kitchen", comment="c3"), handle("3.jpg"))

        groups = await service.get_grouped_photos(users["tenant"], inspection.id)

        assert [g.room for g in groups] == ["Bath", "Kitchen"]
        assert [p.comment for p in groups[0].photos] == ["c2"]
        assert [p.comment for p in groups[1].photos] == ["c1", "c3"]

    async def test_comment_is_stored_verbatim(self, service, users, inspection):
        photo = await service.add_photo(
            users["inspector"], inspection.id, PhotoCreate(room=" Kitchen ", comment="  chipped tile\n"), handle()
        )
        assert photo.room == "Kitchen"
        assert photo.comment == "  chipped tile\n"

    async def test_ordinals_follow_creation_order(self, service, store, users, inspection):
        for room in ("Hall", "Attic", "Hall"):
            await service.add_photo(users["admin"], inspection.id, PhotoCreate(room=room), handle())
        photos = await store.list_photos(inspection.id)
        assert [p.ordinal for p in photos] == [0, 1, 2]

    async def test_tenant_is_forbidden_and_nothing_is_written(self, service, store, users, inspection):
        with pytest.raises(Forbidden):
            await service.add_photo(users["tenant"], inspection.id, PhotoCreate(room="Kitchen"), handle())
        assert await store.count_photos(inspection.id) == 0

    async def test_hidden_inspection_is_not_visible(self, service, users):
        with pytest.raises(NotVisible):
            await service.add_photo(users["inspector"], uuid4(), PhotoCreate(room="Kitchen"), handle())

    async def test_finalized_inspection_rejects_photos(self, service, store, db, users, inspection, add_photos):
        await add_photos(inspection, [("Kitchen", "c1")])
        finalize(inspection)
        await db.commit()

        with pytest.raises(InspectionClosed) as exc:
            await service.add_photo(users["inspector"], inspection.id, PhotoCreate(room="Bath"), handle())

        assert exc.value.status_code == 409
        assert await store.count_photos(inspection.id) == 1

    async def test_lock_is_released_after_each_photo(self, service, locks, users, inspection):
        await service.add_photo(users["inspector"], inspection.id, PhotoCreate(room="Kitchen"), handle())
        assert len(locks) == 0

    async def test_busy_inspection_times_out_and_nothing_is_written(self, service, store, locks, users, inspection):
        service.lock_timeout = 0.05
        async with locks.hold(inspection.id, timeout=1.0):
            with pytest.raises(StorageWriteFailed) as exc:
                await service.add_photo(users["inspector"], inspection.id, PhotoCreate(room="Kitchen"), handle())

        assert exc.value.status_code == 503
        assert await store.count_photos(inspection.id) == 0

    def test_injected_empty_lock_registry_is_used(self, store):
        mine = InspectionLocks()
        assert InspectionService(store, locks=mine).locks is mine


class TestLifecycle:
    def test_finalize_is_one_way(self, inspection):
        assert finalize(inspection) is True
        first = inspection.finalized_at
        assert finalize(inspection) is False
        assert inspection.status == InspectionStatus.FINALIZED
        assert inspection.finalized_at == first

    def test_grouping_is_empty_without_photos(self):
        assert group_photos_by_room([]) == []
