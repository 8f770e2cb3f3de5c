# fleet_portal/schemas/message.py
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional

from fleet_portal.schemas.actor import Role
from fleet_portal.services.location_service import require_concrete


class MessageCreate(BaseModel):
    content: str = Field(min_length=1)
    recipient_ids: list[str] = []            # empty = broadcast
    recipient_roles: list[Role] = []
    location: Optional[str] = None           # restrict to one site
    parent_message_id: Optional[int] = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v) if v is not None else v

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageOut(BaseModel):
    id: int
    sender_id: str
    sender_name: str
    sender_role: str
    recipient_ids: list[str]
    recipient_roles: list[str]
    location: Optional[str]
    content: str
    parent_message_id: Optional[int]
    read: bool = False                       # for the reader, see messaging_service.as_out
    created_at: datetime


class MessageThread(BaseModel):
    root: MessageOut
    replies: list[MessageOut]
    unread_count: int


class UnreadCount(BaseModel):
    unread: int
