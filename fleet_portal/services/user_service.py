# fleet_portal/services/user_service.py
"""
User and admin management.
All checks run before the store is touched: a malformed or duplicate email
raises ValidationError and nothing is written.
"""

import re
from typing import Optional

from fleet_portal.exceptions import ActionNotAllowed, ValidationError
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.user import UserCreate, UserUpdate
from fleet_portal.services.access_policy import ADMIN, SUPER_ADMIN, is_location_restricted
from fleet_portal.services.location_service import ALL, is_concrete, normalize
from fleet_portal.services.notification_service import notify
from fleet_portal.services.repository import Repository
from fleet_portal.utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Which roles each manager may create
MANAGEABLE_ROLES = {
    SUPER_ADMIN: {"super_admin", "admin", "trainer", "security"},
    ADMIN: {"trainer", "security"},
}


def validate_email(email: Optional[str]) -> str:
    value = (email or "").strip()
    if not value:
        raise ValidationError("Email is required", field="email")
    if not EMAIL_PATTERN.match(value):
        raise ValidationError(f"'{value}' is not a valid email address", field="email")
    return value


def ensure_unique_email(users: Repository, email: str, exclude_id: Optional[int] = None) -> None:
    """Case-insensitive check against every stored user, not just the visible ones."""
    wanted = email.lower()
    for user in users.records:
        if user.id != exclude_id and (user.email or "").lower() == wanted:
            raise ValidationError(f"A user with email '{email}' already exists", field="email")


def _check_role(actor: Optional[Actor], role: str) -> None:
    allowed = MANAGEABLE_ROLES.get(actor.role if actor else "", set())
    if role not in allowed:
        raise ActionNotAllowed(f"Role '{actor.role if actor else 'anonymous'}' cannot manage '{role}' users")


def _check_user_location(role: str, location: Optional[str]) -> None:
    """Admins and security staff need a home location; only they (and super admins) may hold ALL."""
    if role in ("admin", "security") and not location:
        raise ValidationError(f"A location is required for {role} users", field="location")
    if location == ALL and role not in ("admin", "security", "super_admin"):
        raise ValidationError(f"{role} users cannot be assigned to ALL", field="location")


async def create_user(users: Repository, actor: Optional[Actor], data: UserCreate):
    _check_role(actor, data.role)
    email = validate_email(data.email)

    fields = data.model_dump()
    fields["email"] = email
    if not fields["location"] and is_location_restricted(actor):
        # Site admins create staff at their own site
        fields["location"] = normalize(actor.home_location) if is_concrete(actor.home_location) else None
    _check_user_location(data.role, fields["location"])

    users.load()
    ensure_unique_email(users, email)
    user = users.create(actor, fields)
    await notify("User created", f"{user.name} ({user.role}) added", "success", user_id=user.id)
    return user


async def create_admin(users: Repository, actor: Optional[Actor], data: UserCreate):
    """Super-admin flow for adding a location administrator."""
    if data.role != "admin":
        raise ValidationError("create_admin only creates admin users", field="role")
    return await create_user(users, actor, data)


async def update_user(users: Repository, actor: Optional[Actor], user_id: int, data: UserUpdate):
    fields = data.model_dump(exclude_unset=True)
    users.load()
    current = users.find(actor, user_id)
    role = fields.get("role") or current.role
    _check_role(actor, role)
    _check_user_location(role, fields["location"] if "location" in fields else current.location)

    if "email" in fields:
        fields["email"] = validate_email(fields["email"])
        ensure_unique_email(users, fields["email"], exclude_id=user_id)

    user = users.update(actor, user_id, fields)
    await notify("User updated", f"{user.name} updated", "success", user_id=user.id)
    return user


async def delete_user(users: Repository, actor: Optional[Actor], user_id: int) -> None:
    users.load()
    current = users.find(actor, user_id)
    _check_role(actor, current.role)
    users.delete(actor, user_id)
    await notify("User removed", f"{current.name} removed", "success", user_id=user_id)
