"""
Visibility engine: who may see a record and who may create one.

Single source of truth for authorization in the inspection core.
Pure Python decisions plus SQLAlchemy predicates for list scoping;
no FastAPI imports and no database access.

View rules, first match wins:
    admin      -> every property
    inspector  -> every property
    landlord   -> properties where landlord_id == actor.id
    tenant     -> properties where tenant_id == actor.id
    otherwise  -> nothing

Inspections and photos are never judged on their own fields. They are
visible exactly when their owning property is visible.
"""

import logging
from enum import Enum
from typing import Optional, Union

from sqlalchemy import ColumnElement, false, select, true

from rentinspect.core.exceptions import Forbidden, NotVisible
from rentinspect.models.enums import UserRole
from rentinspect.models.inspection import Inspection, Photo
from rentinspect.models.property import Property
from rentinspect.models.user import User

logger = logging.getLogger(__name__)

Record = Union[Property, Inspection, Photo]


class Permission(str, Enum):
    """Mutations gated by role."""
    PROPERTY_CREATE = "property:create"
    INSPECTION_CREATE = "inspection:create"
    PHOTO_CREATE = "photo:create"


# Inspectors need to document any property, so they see all of them
BLANKET_VIEW_ROLES = frozenset({UserRole.ADMIN, UserRole.INSPECTOR})

ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.ADMIN: frozenset({
        Permission.PROPERTY_CREATE,
        Permission.INSPECTION_CREATE,
        Permission.PHOTO_CREATE,
    }),
    UserRole.LANDLORD: frozenset({
        Permission.PROPERTY_CREATE,
    }),
    UserRole.TENANT: frozenset(),
    UserRole.INSPECTOR: frozenset({
        Permission.INSPECTION_CREATE,
        Permission.PHOTO_CREATE,
    }),
}


def actor_role(actor: Optional[User]) -> Optional[UserRole]:
    """Return the actor's role, or None for a missing actor or unknown role."""
    if actor is None or actor.role is None:
        return None
    try:
        return UserRole(actor.role)
    except ValueError:
        return None


def owning_property(record: Record) -> Optional[Property]:
    """Walk Photo -> Inspection -> Property.

    The parent chain must already be loaded on the record.
    """
    if isinstance(record, Property):
        return record
    if isinstance(record, Inspection):
        return record.property
    if isinstance(record, Photo):
        inspection = record.inspection
        return inspection.property if inspection is not None else None
    raise TypeError(f"Visibility is not defined for {type(record).__name__}")


def can_view_property(actor: Optional[User], prop: Optional[Property]) -> bool:
    """The view decision table for a single property."""
    role = actor_role(actor)
    if role is None or prop is None:
        return False
    if role in BLANKET_VIEW_ROLES:
        return True
    if role == UserRole.LANDLORD:
        return prop.landlord_id is not None and prop.landlord_id == actor.id
    if role == UserRole.TENANT:
        return prop.tenant_id is not None and prop.tenant_id == actor.id
    return False


def can_view(actor: Optional[User], record: Record) -> bool:
    """Whether ``actor`` may read ``record`` (property, inspection or photo)."""
    return can_view_property(actor, owning_property(record))


def require_visible(actor: Optional[User], record: Optional[Record], label: str) -> None:
    """Raise NotVisible when the record is missing or hidden from the actor.

    Both cases produce the same error so callers cannot tell hidden records from missing ones.
    """
    if record is None or not can_view(actor, record):
        if record is not None:
            logger.debug(f"[VISIBILITY] {label} hidden from actor {getattr(actor, 'id', None)}")
        raise NotVisible(f"{label} not found")


def has_permission(actor: Optional[User], permission: Permission) -> bool:
    role = actor_role(actor)
    if role is None:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def require_permission(actor: Optional[User], permission: Permission) -> None:
    """Raise Forbidden unless the actor's role grants ``permission``."""
    if not has_permission(actor, permission):
        logger.info(
            f"[VISIBILITY] Denied {permission.value} for role "
            f"{getattr(actor_role(actor), 'value', None)}"
        )
        raise Forbidden(f"Your role may not perform {permission.value}")


def property_scope(actor: Optional[User]) -> ColumnElement[bool]:
    """SQL predicate over Property selecting exactly the visible rows."""
    role = actor_role(actor)
    if role in BLANKET_VIEW_ROLES:
        return true()
    if role == UserRole.LANDLORD:
        return Property.landlord_id == actor.id
    if role == UserRole.TENANT:
        return Property.tenant_id == actor.id
    return false()


def inspection_scope(actor: Optional[User]) -> ColumnElement[bool]:
    """SQL predicate over Inspection derived from the owning property's scope."""
    role = actor_role(actor)
    if role in BLANKET_VIEW_ROLES:
        return true()
    if role is None:
        return false()
    return Inspection.property_id.in_(
        select(Property.id).where(property_scope(actor))
    )
