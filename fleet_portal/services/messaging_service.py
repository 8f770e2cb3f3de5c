# fleet_portal/services/messaging_service.py
"""
Staff messaging: direct messages, role broadcasts and threaded replies.

A reader receives a message they did not send when
  - it names no recipients at all (broadcast), or
  - their id is in recipient_ids, or their role is in recipient_roles,
and, for a message pinned to a site, the access policy lets them see that site.
Senders always see their own messages.

Replies hang off the thread root, so a thread is one level deep. Read state is
tracked per reader in read_by.
"""

from typing import Optional

from fleet_portal.exceptions import ActionNotAllowed, RecordNotFound, ValidationError
from fleet_portal.models.message import Message
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.message import MessageCreate, MessageOut
from fleet_portal.services.access_policy import can_access_location, is_location_restricted
from fleet_portal.services.location_service import is_concrete, normalize
from fleet_portal.services.repository import SqlDataAccess
from fleet_portal.utils.logger import get_logger

logger = get_logger(__name__)


# ── Delivery rules (pure) ────────────────────────────────────────────────────

def is_sender(actor: Optional[Actor], message) -> bool:
    return actor is not None and actor.id is not None and str(message.sender_id) == str(actor.id)


def is_recipient(actor: Optional[Actor], message) -> bool:
    if actor is None or is_sender(actor, message):
        return False
    if message.location and not can_access_location(actor, message.location):
        return False
    ids = message.recipient_ids or []
    roles = message.recipient_roles or []
    if not ids and not roles:
        return True
    return (actor.id is not None and str(actor.id) in ids) or actor.role in roles


def can_read(actor: Optional[Actor], message) -> bool:
    return is_sender(actor, message) or is_recipient(actor, message)


def is_unread(actor: Optional[Actor], message) -> bool:
    if not is_recipient(actor, message):
        return False
    return actor.id is None or str(actor.id) not in (message.read_by or [])


def as_out(actor: Optional[Actor], message) -> MessageOut:
    """Response view of a message, with `read` as seen by this actor."""
    return MessageOut(
        id=message.id,
        sender_id=message.sender_id,
        sender_name=message.sender_name,
        sender_role=message.sender_role,
        recipient_ids=message.recipient_ids or [],
        recipient_roles=message.recipient_roles or [],
        location=message.location,
        content=message.content,
        parent_message_id=message.parent_message_id,
        read=not is_unread(actor, message),
        created_at=message.created_at,
    )


# ── Service ──────────────────────────────────────────────────────────────────

class MessagingService:
    def __init__(self, data_access: SqlDataAccess):
        self.data_access = data_access

    @classmethod
    def for_session(cls, db) -> "MessagingService":
        return cls(SqlDataAccess(db, Message))

    def visible(self, actor: Optional[Actor]) -> list:
        """Messages the actor sent or received, newest first."""
        if actor is None:
            return []
        return [m for m in self.data_access.fetch_all() if can_read(actor, m)]

    def find(self, actor: Optional[Actor], message_id: int):
        message = self.data_access.get(message_id)
        if message is None or not can_read(actor, message):
            raise RecordNotFound(f"Message #{message_id} not found")
        return message

    def send(self, actor: Optional[Actor], data: MessageCreate):
        if actor is None or not actor.id:
            raise ActionNotAllowed("Only signed-in staff can send messages")

        fields = data.model_dump()
        if data.parent_message_id is not None:
            parent = self.find(actor, data.parent_message_id)
            fields["parent_message_id"] = parent.parent_message_id or parent.id
            if not fields["recipient_ids"] and not fields["recipient_roles"]:
                if is_sender(actor, parent):
                    fields["recipient_ids"] = list(parent.recipient_ids or [])
                    fields["recipient_roles"] = list(parent.recipient_roles or [])
                else:
                    fields["recipient_ids"] = [parent.sender_id]
            fields["location"] = fields["location"] or parent.location

        if not fields["location"] and is_location_restricted(actor) and is_concrete(actor.home_location):
            # Site staff broadcast to their own site
            fields["location"] = normalize(actor.home_location)
        if fields["location"] and not can_access_location(actor, fields["location"]):
            raise ValidationError(f"Location '{fields['location']}' is outside your assigned location",
                                  field="location")

        fields.update(
            sender_id=str(actor.id),
            sender_name=actor.name or actor.role,
            sender_role=actor.role,
            read_by=[],
        )
        message = self.data_access.create(fields)
        logger.info(
            f"[MESSAGE] #{message.id} from {message.sender_id} to "
            f"ids={message.recipient_ids or 'all'} roles={message.recipient_roles} location={message.location}"
        )
        return message

    def mark_read(self, actor: Optional[Actor], message_id: int):
        message = self.find(actor, message_id)
        if not is_unread(actor, message):
            return message
        if not actor.id:
            raise ValidationError("An actor id is required to track read messages", field="id")
        return self.data_access.update(message_id, {"read_by": [*(message.read_by or []), str(actor.id)]})

    def unread_count(self, actor: Optional[Actor]) -> int:
        return sum(1 for m in self.visible(actor) if is_unread(actor, m))

    def thread(self, actor: Optional[Actor], message_id: int) -> tuple:
        """(root, replies oldest first) for the thread containing message_id."""
        message = self.find(actor, message_id)
        root_id = message.parent_message_id or message.id
        root = message if root_id == message.id else self.find(actor, root_id)
        replies = [m for m in self.visible(actor) if m.parent_message_id == root_id]
        replies.sort(key=lambda m: (m.created_at, m.id))
        return root, replies
