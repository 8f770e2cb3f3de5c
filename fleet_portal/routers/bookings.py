# fleet_portal/routers/bookings.py
"""
Bookings and the booking workflow.
Overdue / ready-for-pickup are derived per request from a single clock reading.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_portal.database import get_db
from fleet_portal.routers.deps import booking_repo, get_actor
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.booking import (
    BookingCreate,
    BookingOut,
    BookingStatusUpdate,
    IncidentReport,
    KeyIssueRequest,
    VehicleReturnRequest,
)
from fleet_portal.schemas.security_log import SecurityLogOut
from fleet_portal.services import booking_service
from fleet_portal.services.repository import Repository
from fleet_portal.utils.time_utils import utcnow

router = APIRouter()


@router.get("/bookings", response_model=list[BookingOut], summary="List bookings")
def list_bookings(status: Optional[str] = None, overdue: Optional[bool] = None,
                  actor: Optional[Actor] = Depends(get_actor),
                  bookings: Repository = Depends(booking_repo)):
    """
    Filter by stored `status` or by derived display status
    (`overdue`, `ready_for_pickup`).
    """
    now = utcnow()
    result = [BookingOut.from_booking(b, now) for b in bookings.visible(actor)]
    if status:
        result = [b for b in result if status in (b.status, b.display_status)]
    if overdue is not None:
        result = [b for b in result if b.is_overdue == overdue]
    return result


@router.get("/bookings/{booking_id}", response_model=BookingOut, summary="Get one booking")
def get_booking(booking_id: int, actor: Optional[Actor] = Depends(get_actor),
                bookings: Repository = Depends(booking_repo)):
    return BookingOut.from_booking(bookings.find(actor, booking_id), utcnow())


@router.post("/bookings", response_model=BookingOut, status_code=201, summary="Request a booking")
async def create_booking(body: BookingCreate, actor: Optional[Actor] = Depends(get_actor),
                         db: Session = Depends(get_db)):
    booking = await booking_service.request_booking(db, actor, body)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/approve", response_model=BookingOut, summary="Approve a booking")
async def approve_booking(booking_id: int, body: Optional[BookingStatusUpdate] = None,
                          actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    booking = await booking_service.approve_booking(db, actor, booking_id, body.notes if body else None)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/reject", response_model=BookingOut, summary="Reject a booking")
async def reject_booking(booking_id: int, body: Optional[BookingStatusUpdate] = None,
                         actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    booking = await booking_service.reject_booking(db, actor, booking_id, body.notes if body else None)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/cancel", response_model=BookingOut, summary="Cancel a booking")
async def cancel_booking(booking_id: int, actor: Optional[Actor] = Depends(get_actor),
                         db: Session = Depends(get_db)):
    booking = await booking_service.cancel_booking(db, actor, booking_id)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/issue-key", response_model=BookingOut, summary="Hand over the key")
async def issue_key(booking_id: int, body: KeyIssueRequest = KeyIssueRequest(),
                    actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    booking = await booking_service.issue_key(db, actor, booking_id, body.notes)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/return", response_model=BookingOut, summary="Record the vehicle return")
async def return_vehicle(booking_id: int, body: VehicleReturnRequest = VehicleReturnRequest(),
                         actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    booking = await booking_service.return_vehicle(db, actor, booking_id, body.condition, body.notes)
    return BookingOut.from_booking(booking, utcnow())


@router.post("/bookings/{booking_id}/damage", response_model=SecurityLogOut, summary="Report damage")
async def report_damage(booking_id: int, body: IncidentReport,
                        actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    return await booking_service.report_damage(db, actor, booking_id, body.description)


@router.post("/bookings/{booking_id}/parts", response_model=SecurityLogOut, summary="Request parts")
async def request_parts(booking_id: int, body: IncidentReport,
                        actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    return await booking_service.request_parts(db, actor, booking_id, body.description)


@router.patch("/bookings/{booking_id}/status", response_model=BookingOut, summary="Change booking status")
async def update_status(booking_id: int, body: BookingStatusUpdate,
                        actor: Optional[Actor] = Depends(get_actor), db: Session = Depends(get_db)):
    booking = await booking_service.update_status(db, actor, booking_id, body.status, body.notes)
    return BookingOut.from_booking(booking, utcnow())


@router.delete("/bookings/{booking_id}", summary="Delete a booking")
def delete_booking(booking_id: int, actor: Optional[Actor] = Depends(get_actor),
                   db: Session = Depends(get_db)):
    """Security log entries for the booking are kept."""
    booking_service.delete_booking(db, actor, booking_id)
    return {"status": "removed", "id": booking_id}
