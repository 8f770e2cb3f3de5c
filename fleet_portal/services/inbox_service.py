# fleet_portal/services/inbox_service.py
"""
Per-user notification inbox.

Booking events are routed to the people who act on them: the trainer who owns
the booking, and admin or security staff whose home location covers the
booking's site. Site coverage is the access policy's decision, so ALL-scoped
staff receive every site's events.

A repeat of the same event for the same user and entity replaces the earlier
notification and marks it unread again instead of stacking duplicates.
"""

from typing import Any, Iterable, Optional

from fleet_portal.exceptions import RecordNotFound
from fleet_portal.models.notification import Notification
from fleet_portal.models.user import User
from fleet_portal.schemas.actor import Actor
from fleet_portal.services.access_policy import ADMIN, SECURITY, can_access_location
from fleet_portal.services.repository import SqlDataAccess, unit_of_work
from fleet_portal.utils.logger import get_logger
from fleet_portal.utils.record_fields import get_field, get_location

logger = get_logger(__name__)

BOOKING_CREATED = "booking_created"
BOOKING_APPROVED = "booking_approved"
BOOKING_REJECTED = "booking_rejected"
BOOKING_CANCELLED = "booking_cancelled"
KEY_ISSUED = "key_issued"
VEHICLE_RETURNED = "vehicle_returned"
DAMAGE_REPORTED = "damage_reported"
PARTS_REQUESTED = "parts_requested"
MAINTENANCE_REQUIRED = "maintenance_required"

# event -> (trainer is told, staff roles at the booking's site that are told)
ROUTES: dict[str, tuple[bool, frozenset]] = {
    BOOKING_CREATED:      (False, frozenset({ADMIN})),
    BOOKING_APPROVED:     (True,  frozenset({SECURITY})),
    BOOKING_REJECTED:     (True,  frozenset()),
    BOOKING_CANCELLED:    (False, frozenset({ADMIN})),
    KEY_ISSUED:           (True,  frozenset()),
    VEHICLE_RETURNED:     (True,  frozenset({ADMIN})),
    DAMAGE_REPORTED:      (False, frozenset({ADMIN})),
    PARTS_REQUESTED:      (False, frozenset({ADMIN})),
    MAINTENANCE_REQUIRED: (False, frozenset({ADMIN})),
}

ENTITY_TYPES = {
    DAMAGE_REPORTED: "damage_report",
    PARTS_REQUESTED: "parts_request",
    MAINTENANCE_REQUIRED: "vehicle",
}

ACTION_URLS = {
    "trainer": "/trainer/bookings",
    ADMIN: "/admin/bookings",
    SECURITY: "/security/keys",
}


class InboxService:
    def __init__(self, data_access: SqlDataAccess, users: SqlDataAccess):
        self.data_access = data_access
        self.users = users

    @classmethod
    def for_session(cls, db) -> "InboxService":
        return cls(SqlDataAccess(db, Notification), SqlDataAccess(db, User))

    # Routing

    def staff_for_location(self, location: Optional[str], roles: Iterable[str]) -> list[str]:
        """Ids of active users holding one of `roles` whose home location covers `location`."""
        roles = set(roles)
        ids = []
        for user in self.users.fetch_all():
            if user.role not in roles or user.status == "inactive":
                continue
            staff = Actor(role=user.role, home_location=user.location, id=str(user.id))
            if can_access_location(staff, location):
                ids.append(str(user.id))
        return ids

    def route_booking_event(self, event: str, booking: Any, title: str, message: str,
                            severity: str = "info", extra: Optional[dict] = None) -> list:
        tell_trainer, roles = ROUTES[event]
        entity_type = ENTITY_TYPES.get(event, "booking")
        entity_id = get_field(booking, "vehicle_id") if entity_type == "vehicle" else get_field(booking, "id")
        common = dict(type=event, title=title, message=message, severity=severity,
                      related_entity_type=entity_type, related_entity_id=entity_id, extra=extra)

        delivered = []
        if tell_trainer:
            trainer_id = get_field(booking, "trainer_id", "trainerId")
            delivered += self.deliver([trainer_id], action_url=ACTION_URLS["trainer"], **common)
        for role in sorted(roles):
            staff = self.staff_for_location(get_location(booking), [role])
            delivered += self.deliver(staff, action_url=ACTION_URLS[role], **common)
        return delivered

    def deliver(self, user_ids: Iterable[Any], type: str, title: str, message: str, severity: str = "info",
                related_entity_type: Optional[str] = None, related_entity_id: Any = None,
                action_url: Optional[str] = None, extra: Optional[dict] = None) -> list:
        recipients = list(dict.fromkeys(str(u) for u in user_ids if u not in (None, "")))
        if not recipients:
            return []
        entity_id = str(related_entity_id) if related_entity_id is not None else None
        existing = {
            (n.user_id, n.type, n.related_entity_id): n
            for n in self.data_access.fetch_all() if n.user_id in recipients
        }

        delivered = []
        for user_id in recipients:
            fields = dict(user_id=user_id, type=type, title=title, message=message, severity=severity,
                          related_entity_type=related_entity_type, related_entity_id=entity_id,
                          action_url=action_url, extra=extra, read=False)
            prior = existing.get((user_id, type, entity_id))
            if prior is not None:
                delivered.append(self.data_access.update(prior.id, fields))
            else:
                delivered.append(self.data_access.create(fields))
        logger.info(f"[INBOX] {type} -> {recipients}")
        return delivered

    # Reading

    def for_user(self, actor: Optional[Actor], unread_only: bool = False) -> list:
        if actor is None or not actor.id:
            return []
        return [
            n for n in self.data_access.fetch_all()
            if n.user_id == str(actor.id) and not (unread_only and n.read)
        ]

    def unread_count(self, actor: Optional[Actor]) -> int:
        return len(self.for_user(actor, unread_only=True))

    def find(self, actor: Optional[Actor], notification_id: int):
        notification = self.data_access.get(notification_id)
        if notification is None or actor is None or notification.user_id != str(actor.id):
            raise RecordNotFound(f"Notification #{notification_id} not found")
        return notification

    def mark_read(self, actor: Optional[Actor], notification_id: int):
        notification = self.find(actor, notification_id)
        if notification.read:
            return notification
        return self.data_access.update(notification_id, {"read": True})

    def mark_all_read(self, actor: Optional[Actor]) -> int:
        unread = self.for_user(actor, unread_only=True)
        with unit_of_work(self.data_access.db):
            for notification in unread:
                self.data_access.update(notification.id, {"read": True})
        return len(unread)

    def delete(self, actor: Optional[Actor], notification_id: int) -> None:
        self.find(actor, notification_id)
        self.data_access.delete(notification_id)
