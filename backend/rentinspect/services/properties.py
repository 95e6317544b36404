"""Property operations: scoped listing, visible lookup and creation."""

import logging
from typing import Optional
from uuid import UUID

from rentinspect.core.exceptions import InvalidAssignment
from rentinspect.models.enums import UserRole
from rentinspect.models.property import Property
from rentinspect.models.user import User
from rentinspect.schemas.property import PropertyCreate
from rentinspect.services.audit import AuditService
from rentinspect.services.record_store import RecordStore
from rentinspect.services.visibility import (
    Permission,
    actor_role,
    property_scope,
    require_permission,
    require_visible,
)

logger = logging.getLogger(__name__)


class PropertyService:
    """Property operations exposed to the presentation layer."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.audit = AuditService(store.db)

    async def list_visible_properties(self, actor: User) -> list[Property]:
        """Properties the actor may see, ordered by address."""
        return await self.store.list_properties(property_scope(actor))

    async def get_property_if_visible(self, actor: User, property_id: UUID) -> Property:
        """Raises NotVisible for both missing and hidden properties."""
        prop = await self.store.get_property(property_id)
        require_visible(actor, prop, "Property")
        return prop

    async def _resolve_assignee(self, email: str, role: UserRole, field: str) -> User:
        user = await self.store.get_user_by_email(email)
        if user is None or actor_role(user) != role:
            raise InvalidAssignment(
                f"{field} must belong to a registered {role.value}",
                details={"field": field},
            )
        return user

    async def create_property(self, actor: User, data: PropertyCreate) -> Property:
        """Create a property.

        Admins assign any landlord by email. Landlords always own what they
        create. Every reference is validated before anything is written.

        Raises:
            Forbidden: the actor's role may not create properties
            InvalidAssignment: landlord/tenant email does not resolve to that role
        """
        require_permission(actor, Permission.PROPERTY_CREATE)

        if actor_role(actor) == UserRole.ADMIN:
            if not data.landlord_email:
                raise InvalidAssignment(
                    "landlord_email is required when an admin creates a property",
                    details={"field": "landlord_email"},
                )
            landlord_id = (await self._resolve_assignee(
                data.landlord_email, UserRole.LANDLORD, "landlord_email"
            )).id
        else:
            landlord_id = actor.id

        tenant_id: Optional[UUID] = None
        if data.tenant_email:
            tenant_id = (await self._resolve_assignee(
                data.tenant_email, UserRole.TENANT, "tenant_email"
            )).id

        prop = Property(
            address=data.address,
            rooms_count=data.rooms_count,
            amenities=data.amenities,
            landlord_id=landlord_id,
            tenant_id=tenant_id,
            created_by_id=actor.id,
        )
        await self.store.add(prop)
        await self.audit.log_property_created(
            property_id=prop.id,
            user_id=actor.id,
            landlord_id=landlord_id,
            tenant_id=tenant_id,
        )
        await self.store.commit()

        logger.info(f"[PROPERTY] {actor.email} created property {prop.id}")
        return prop
