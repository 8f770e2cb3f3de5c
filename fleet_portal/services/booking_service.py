# fleet_portal/services/booking_service.py
"""
Booking workflow: request → approve/reject → issue key → return, plus cancel,
damage reports and parts requests.

Every step checks the actor's role, moves the stored status forward through
booking_state.TRANSITIONS, keeps the vehicle's status in step, appends to the
security log where the step is a physical hand-over, and sends a notification.
Hand-over steps write the booking, vehicle and log entry in one unit of work,
so a store failure leaves none of them changed.
Bookings outside the actor's location surface as RecordNotFound.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleet_portal.exceptions import ActionNotAllowed, DataAccessError, ValidationError
from fleet_portal.models.booking import Booking
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.booking import BookingCreate
from fleet_portal.services import booking_state
from fleet_portal.services.access_policy import ADMIN, SECURITY, SUPER_ADMIN, TRAINER
from fleet_portal.services import inbox_service
from fleet_portal.services.inbox_service import InboxService
from fleet_portal.services.notification_service import notify
from fleet_portal.services.repository import repository_for, unit_of_work
from fleet_portal.services.security_log_service import SecurityLogService
from fleet_portal.utils.logger import get_logger
from fleet_portal.utils.time_utils import utcnow

logger = get_logger(__name__)

VEHICLE_AVAILABLE = "Available"
VEHICLE_BOOKED = "Booked"
VEHICLE_MAINTENANCE = "Maintenance"
VEHICLE_OUT_OF_SERVICE = "Out of Service"
UNBOOKABLE_VEHICLE_STATUSES = {VEHICLE_MAINTENANCE, VEHICLE_OUT_OF_SERVICE}

REQUEST_ROLES = {TRAINER, ADMIN, SUPER_ADMIN}
APPROVAL_ROLES = {ADMIN, SUPER_ADMIN}
HANDOVER_ROLES = {SECURITY, ADMIN, SUPER_ADMIN}
INCIDENT_ROLES = {TRAINER, SECURITY, ADMIN, SUPER_ADMIN}


def _require_role(actor: Optional[Actor], roles: set, action: str) -> None:
    if actor is None or actor.role not in roles:
        role = actor.role if actor else "anonymous"
        raise ActionNotAllowed(f"Role '{role}' cannot {action}")


def _require_own_booking(actor: Actor, booking: Booking, action: str) -> None:
    """Trainers may only act on their own bookings."""
    if actor.role == TRAINER and str(booking.trainer_id) != str(actor.id):
        raise ActionNotAllowed(f"Trainers can only {action} their own bookings")


def _move(bookings, actor: Actor, booking: Booking, target: str, **fields) -> Booking:
    if not booking_state.can_transition(booking.status, target):
        raise ValidationError(
            f"Booking {booking.booking_ref} cannot move from '{booking.status}' to '{target}'",
            field="status",
        )
    logger.info(f"[BOOKING] {booking.booking_ref}: {booking.status} -> {target} by {actor.role}")
    return bookings.update(actor, booking.id, {"status": target, **fields})


def _set_vehicle_status(db: Session, vehicle_id: int, status: str) -> Optional[Vehicle]:
    """Vehicle updates are unscoped: the booking was already authorized."""
    vehicles = repository_for(db, Vehicle)
    vehicle = vehicles.data_access.get(vehicle_id)
    if vehicle is None:
        logger.warning(f"[BOOKING] vehicle #{vehicle_id} no longer exists, status not updated")
        return None
    return vehicles.data_access.update(vehicle_id, {"status": status})


def _vehicle_label(vehicle: Optional[Vehicle]) -> str:
    return f"{vehicle.brand} {vehicle.model}" if vehicle else "Unknown vehicle"


async def _announce(db: Session, event: str, booking: Booking, title: str, description: str,
                    severity: str = "info") -> None:
    """Drop the event into the inbox of everyone it concerns, then send the notification."""
    try:
        with unit_of_work(db):
            InboxService.for_session(db).route_booking_event(event, booking, title, description, severity)
    except DataAccessError as e:
        logger.error(f"[BOOKING] inbox delivery failed for {booking.booking_ref}: {e.message}")
    await notify(title, description, severity, booking_id=booking.id)


async def request_booking(db: Session, actor: Optional[Actor], data: BookingCreate) -> Booking:
    _require_role(actor, REQUEST_ROLES, "request bookings")

    vehicles = repository_for(db, Vehicle)
    vehicles.load()
    vehicle = vehicles.find(actor, data.vehicle_id)
    if vehicle.status in UNBOOKABLE_VEHICLE_STATUSES:
        raise ValidationError(f"Vehicle {vehicle.license_plate} is {vehicle.status}", field="vehicle_id")

    fields = data.model_dump()
    fields["requested_location"] = data.requested_location or vehicle.location
    if actor.role == TRAINER or not fields.get("trainer_id"):
        fields["trainer_id"] = str(actor.id or "")
        fields["trainer_name"] = actor.name or fields.get("trainer_name") or ""
    if not fields["trainer_id"]:
        raise ValidationError("A trainer is required for the booking", field="trainer_id")
    fields["status"] = booking_state.PENDING

    bookings = repository_for(db, Booking)
    booking = bookings.create(actor, fields)
    await _announce(
        db, inbox_service.BOOKING_CREATED, booking, "Booking requested",
        f"{booking.trainer_name} requested {_vehicle_label(vehicle)} ({booking.booking_ref})",
    )
    return booking


async def _load_booking(db: Session, actor: Actor, booking_id: int):
    bookings = repository_for(db, Booking)
    bookings.load()
    return bookings, bookings.find(actor, booking_id)


async def approve_booking(db: Session, actor: Optional[Actor], booking_id: int,
                          notes: Optional[str] = None) -> Booking:
    _require_role(actor, APPROVAL_ROLES, "approve bookings")
    bookings, booking = await _load_booking(db, actor, booking_id)
    fields = {"notes": notes} if notes else {}
    booking = _move(bookings, actor, booking, booking_state.APPROVED, **fields)
    await _announce(db, inbox_service.BOOKING_APPROVED, booking, "Booking approved",
                    f"{booking.booking_ref} approved for {booking.trainer_name}", "success")
    return booking


async def reject_booking(db: Session, actor: Optional[Actor], booking_id: int,
                         notes: Optional[str] = None) -> Booking:
    _require_role(actor, APPROVAL_ROLES, "reject bookings")
    bookings, booking = await _load_booking(db, actor, booking_id)
    fields = {"notes": notes} if notes else {}
    booking = _move(bookings, actor, booking, booking_state.REJECTED, **fields)
    reason = f" Reason: {notes}" if notes else ""
    await _announce(db, inbox_service.BOOKING_REJECTED, booking, "Booking rejected",
                    f"{booking.booking_ref} rejected.{reason}", "warning")
    return booking


async def cancel_booking(db: Session, actor: Optional[Actor], booking_id: int) -> Booking:
    _require_role(actor, REQUEST_ROLES, "cancel bookings")
    bookings, booking = await _load_booking(db, actor, booking_id)
    _require_own_booking(actor, booking, "cancel")
    booking = _move(bookings, actor, booking, booking_state.CANCELLED)
    await _announce(db, inbox_service.BOOKING_CANCELLED, booking, "Booking cancelled",
                    f"{booking.booking_ref} cancelled", "warning")
    return booking


async def issue_key(db: Session, actor: Optional[Actor], booking_id: int,
                    notes: Optional[str] = None, now: Optional[datetime] = None) -> Booking:
    """Hand the key over: approved → active, vehicle → Booked, log 'Key Issued'."""
    _require_role(actor, HANDOVER_ROLES, "issue keys")
    bookings, booking = await _load_booking(db, actor, booking_id)
    with unit_of_work(db):
        booking = _move(bookings, actor, booking, booking_state.ACTIVE)
        vehicle = _set_vehicle_status(db, booking.vehicle_id, VEHICLE_BOOKED)
        SecurityLogService.for_session(db).log_key_issued(
            actor, booking, vehicle or {"id": booking.vehicle_id}, notes=notes, now=now
        )
    await _announce(db, inbox_service.KEY_ISSUED, booking, "Key issued",
                    f"Key for {_vehicle_label(vehicle)} issued to {booking.trainer_name}", "success")
    return booking


async def return_vehicle(db: Session, actor: Optional[Actor], booking_id: int,
                         condition: str = "good", notes: Optional[str] = None,
                         now: Optional[datetime] = None) -> Booking:
    """active → completed; a damaged return sends the vehicle to Maintenance."""
    _require_role(actor, HANDOVER_ROLES, "record vehicle returns")
    if condition == "damaged" and not (notes or "").strip():
        raise ValidationError("Describe the damage when returning a damaged vehicle", field="notes")

    bookings, booking = await _load_booking(db, actor, booking_id)
    vehicle_status = VEHICLE_MAINTENANCE if condition == "damaged" else VEHICLE_AVAILABLE
    with unit_of_work(db):
        booking = _move(bookings, actor, booking, booking_state.COMPLETED)
        vehicle = _set_vehicle_status(db, booking.vehicle_id, vehicle_status)
        SecurityLogService.for_session(db).log_vehicle_returned(
            actor, booking, vehicle or {"id": booking.vehicle_id}, condition, notes=notes, now=now or utcnow()
        )
    severity = "warning" if condition == "damaged" else "success"
    await _announce(db, inbox_service.VEHICLE_RETURNED, booking, "Vehicle returned",
                    f"{_vehicle_label(vehicle)} returned ({condition})", severity)
    if condition == "damaged":
        await _announce(db, inbox_service.MAINTENANCE_REQUIRED, booking, "Maintenance required",
                        f"{_vehicle_label(vehicle)} requires maintenance: {notes}", "warning")
    return booking


async def report_damage(db: Session, actor: Optional[Actor], booking_id: int, description: str,
                        now: Optional[datetime] = None):
    _require_role(actor, INCIDENT_ROLES, "report damage")
    _, booking = await _load_booking(db, actor, booking_id)
    _require_own_booking(actor, booking, "report damage on")
    vehicle = repository_for(db, Vehicle).data_access.get(booking.vehicle_id)

    officer = actor if actor.role == SECURITY else None
    entry = SecurityLogService.for_session(db).log_damage_reported(
        booking, vehicle or {"id": booking.vehicle_id}, description, officer=officer, now=now
    )
    await _announce(db, inbox_service.DAMAGE_REPORTED, booking, "Damage reported",
                    f"{_vehicle_label(vehicle)}: {description}", "destructive")
    return entry


async def request_parts(db: Session, actor: Optional[Actor], booking_id: int, description: str,
                        now: Optional[datetime] = None):
    _require_role(actor, INCIDENT_ROLES, "request parts")
    _, booking = await _load_booking(db, actor, booking_id)
    _require_own_booking(actor, booking, "request parts for")
    vehicle = repository_for(db, Vehicle).data_access.get(booking.vehicle_id)

    officer = actor if actor.role == SECURITY else None
    entry = SecurityLogService.for_session(db).log_parts_requested(
        booking, vehicle or {"id": booking.vehicle_id}, description, officer=officer, now=now
    )
    await _announce(db, inbox_service.PARTS_REQUESTED, booking, "Parts requested",
                    f"{_vehicle_label(vehicle)}: {description}")
    return entry


async def update_status(db: Session, actor: Optional[Actor], booking_id: int, status: str,
                        notes: Optional[str] = None) -> Booking:
    """Generic status change, dispatched to the matching workflow step."""
    steps = {
        booking_state.APPROVED: lambda: approve_booking(db, actor, booking_id, notes),
        booking_state.REJECTED: lambda: reject_booking(db, actor, booking_id, notes),
        booking_state.CANCELLED: lambda: cancel_booking(db, actor, booking_id),
        booking_state.ACTIVE: lambda: issue_key(db, actor, booking_id, notes),
        booking_state.COMPLETED: lambda: return_vehicle(db, actor, booking_id, "good", notes),
    }
    step = steps.get(status)
    if step is None:
        raise ValidationError(f"Cannot set booking status to '{status}'", field="status")
    return await step()


def delete_booking(db: Session, actor: Optional[Actor], booking_id: int) -> None:
    """Admins only. Security log entries that reference the booking are untouched."""
    _require_role(actor, APPROVAL_ROLES, "delete bookings")
    repository_for(db, Booking).delete(actor, booking_id)
