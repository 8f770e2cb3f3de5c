# fleet_portal/routers/messages.py
"""Staff messaging: inbox, send and reply, threads, read state."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_portal.database import get_db
from fleet_portal.routers.deps import get_actor
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.message import MessageCreate, MessageOut, MessageThread, UnreadCount
from fleet_portal.services.messaging_service import MessagingService, as_out, is_unread

router = APIRouter()


@router.get("/messages", response_model=list[MessageOut], summary="Messages sent or received")
def list_messages(unread: Optional[bool] = None, actor: Optional[Actor] = Depends(get_actor),
                  db: Session = Depends(get_db)):
    messages = MessagingService.for_session(db).visible(actor)
    if unread is not None:
        messages = [m for m in messages if is_unread(actor, m) == unread]
    return [as_out(actor, m) for m in messages]


@router.get("/messages/unread-count", response_model=UnreadCount, summary="Unread message count")
def unread_messages(actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    return UnreadCount(unread=MessagingService.for_session(db).unread_count(actor))


@router.post("/messages", response_model=MessageOut, status_code=201, summary="Send a message or reply")
def send_message(body: MessageCreate, actor: Optional[Actor] = Depends(get_actor),
                 db: Session = Depends(get_db)):
    """
    Leave `recipientIds` and `recipientRoles` empty to broadcast. A reply
    (`parentMessageId`) with no recipients goes back to the other side of the thread.
    """
    return as_out(actor, MessagingService.for_session(db).send(actor, body))


@router.get("/messages/{message_id}/thread", response_model=MessageThread, summary="Whole conversation")
def get_thread(message_id: int, actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    root, replies = MessagingService.for_session(db).thread(actor, message_id)
    everything = [root, *replies]
    return MessageThread(
        root=as_out(actor, root),
        replies=[as_out(actor, m) for m in replies],
        unread_count=sum(1 for m in everything if is_unread(actor, m)),
    )


@router.post("/messages/{message_id}/read", response_model=MessageOut, summary="Mark a message as read")
def mark_message_read(message_id: int, actor: Optional[Actor] = Depends(get_actor),
                      db: Session = Depends(get_db)):
    return as_out(actor, MessagingService.for_session(db).mark_read(actor, message_id))
