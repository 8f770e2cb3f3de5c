# fleet_portal/routers/notifications.py
"""The signed-in user's notification inbox."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_portal.database import get_db
from fleet_portal.routers.deps import get_actor
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.message import UnreadCount
from fleet_portal.schemas.notification import NotificationOut
from fleet_portal.services.inbox_service import InboxService

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut], summary="My notifications")
def list_notifications(unread: bool = False, actor: Optional[Actor] = Depends(get_actor),
                       db: Session = Depends(get_db)):
    return InboxService.for_session(db).for_user(actor, unread_only=unread)


@router.get("/notifications/unread-count", response_model=UnreadCount, summary="Unread notification count")
def unread_notifications(actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    return UnreadCount(unread=InboxService.for_session(db).unread_count(actor))


@router.post("/notifications/read-all", summary="Mark all my notifications as read")
def mark_all_read(actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    return {"status": "ok", "updated": InboxService.for_session(db).mark_all_read(actor)}


@router.post("/notifications/{notification_id}/read", response_model=NotificationOut,
             summary="Mark a notification as read")
def mark_read(notification_id: int, actor: Optional[Actor] = Depends(get_actor),
              db: Session = Depends(get_db)):
    return InboxService.for_session(db).mark_read(actor, notification_id)


@router.delete("/notifications/{notification_id}", summary="Dismiss a notification")
def delete_notification(notification_id: int, actor: Optional[Actor] = Depends(get_actor),
                        db: Session = Depends(get_db)):
    InboxService.for_session(db).delete(actor, notification_id)
    return {"status": "removed", "id": notification_id}
