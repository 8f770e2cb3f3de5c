# fleet_portal/schemas/notification.py
from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional


class NotificationOut(BaseModel):
    id: int
    user_id: str
    type: str
    title: str
    message: str
    severity: str
    related_entity_type: Optional[str]
    related_entity_id: Optional[str]
    action_url: Optional[str]
    extra: Optional[dict[str, Any]]
    read: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
