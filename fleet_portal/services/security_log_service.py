# fleet_portal/services/security_log_service.py
"""
Security Audit Log: append-only record of key issues, returns, damage reports
and parts requests.

Entries embed snapshots of the officer, trainer, vehicle and booking taken at
append time. Visibility is decided from the snapshot's booking location, never
from a live lookup, so logs remain visible (and unchanged) after the booking or
vehicle they describe is edited or deleted. There is no update or
delete operation.
"""

from datetime import datetime
from typing import Any, Iterable, Optional

from dateutil.relativedelta import relativedelta

from fleet_portal.models.security_log import SecurityLog
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.security_log import (
    BookingSnapshot,
    OfficerSnapshot,
    SecurityLogCreate,
    SecurityLogFilter,
    SecurityLogOut,
    TrainerSnapshot,
    VehicleSnapshot,
)
from fleet_portal.services.access_policy import can_access_location
from fleet_portal.services.location_service import ALL, normalize
from fleet_portal.services.repository import SqlDataAccess
from fleet_portal.utils.logger import get_audit_logger
from fleet_portal.utils.record_fields import get_field, get_reg_no, get_location
from fleet_portal.utils.time_utils import as_utc, isoformat, utcnow

audit_logger = get_audit_logger()

KEY_ISSUED = "Key Issued"
VEHICLE_RETURNED = "Vehicle Returned"
DAMAGE_REPORTED = "Damage Reported"
PARTS_REQUESTED = "Parts Requested"

SYSTEM_OFFICER = OfficerSnapshot(id="system", name="System", email="system@academy.local")

RANGE_DELTAS = {
    "All_Time": None,
    "Last_Week": relativedelta(weeks=1),
    "Last_Month": relativedelta(months=1),
    "Last_3_Months": relativedelta(months=3),
    "Last_6_Months": relativedelta(months=6),
    "Last_Year": relativedelta(years=1),
}


def range_start(range_label: Optional[str], now: datetime) -> Optional[datetime]:
    """Lower bound for a relative range label; None means unbounded."""
    delta = RANGE_DELTAS.get(range_label or "All_Time")
    return as_utc(now) - delta if delta else None


# ── Snapshots ────────────────────────────────────────────────────────────────

def snapshot_officer(actor: Optional[Actor]) -> OfficerSnapshot:
    if actor is None:
        return SYSTEM_OFFICER
    return OfficerSnapshot(id=str(actor.id or ""), name=actor.name or actor.role, email=actor.email or "")


def snapshot_trainer(booking: Any, trainer: Any = None) -> TrainerSnapshot:
    return TrainerSnapshot(
        id=str(get_field(trainer, "id") or get_field(booking, "trainer_id", "trainerId", default="")),
        name=get_field(trainer, "name") or get_field(booking, "trainer_name", "trainerName", default=""),
    )


def snapshot_vehicle(vehicle: Any) -> VehicleSnapshot:
    return VehicleSnapshot(
        id=str(get_field(vehicle, "id", default="")),
        brand=get_field(vehicle, "brand", default=""),
        model=get_field(vehicle, "model", default=""),
        reg_no=get_reg_no(vehicle) or "",
    )


def snapshot_booking(booking: Any, actual_return: Optional[datetime] = None) -> BookingSnapshot:
    booking_id = str(get_field(booking, "id", default=""))
    end_date = isoformat(get_field(booking, "end_date", "endDate"))
    return BookingSnapshot(
        id=booking_id,
        booking_ref=get_field(booking, "booking_ref", "bookingRef", default=booking_id),
        purpose=get_field(booking, "purpose", default=""),
        start_date=isoformat(get_field(booking, "start_date", "startDate")),
        end_date=end_date,
        expected_return_date=end_date,
        actual_return_date=isoformat(actual_return),
        location=get_location(booking) or "Unknown",
    )


# ── Service ──────────────────────────────────────────────────────────────────

class SecurityLogService:
    def __init__(self, data_access: SqlDataAccess):
        self.data_access = data_access

    @classmethod
    def for_session(cls, db) -> "SecurityLogService":
        order = (SecurityLog.timestamp.desc(),)
        return cls(SqlDataAccess(db, SecurityLog, order_by=order))

    def append(self, entry: SecurityLogCreate, now: Optional[datetime] = None) -> SecurityLogOut:
        """Persist a new entry. id and timestamp are assigned here; earlier entries are never touched."""
        fields = entry.model_dump()
        fields["timestamp"] = as_utc(now) if now else utcnow()
        record = self.data_access.create(fields)
        audit_logger.info(
            f"[SECURITY] {entry.type} | booking={entry.booking.booking_ref} "
            f"vehicle={entry.vehicle.reg_no} officer={entry.security_officer.name}"
        )
        return SecurityLogOut.model_validate(record)

    def all_entries(self) -> list[SecurityLogOut]:
        return [SecurityLogOut.model_validate(r) for r in self.data_access.fetch_all()]

    def query(self, actor: Optional[Actor], log_filter: SecurityLogFilter,
              now: Optional[datetime] = None) -> list[SecurityLogOut]:
        """Newest-first entries visible to `actor` that match `log_filter`."""
        return filter_entries(actor, self.all_entries(), log_filter, now or utcnow())

    # Convenience builders used by the booking workflow

    def log_key_issued(self, officer: Optional[Actor], booking, vehicle, trainer=None,
                       notes: Optional[str] = None, now: Optional[datetime] = None) -> SecurityLogOut:
        return self.append(SecurityLogCreate(
            type=KEY_ISSUED,
            security_officer=snapshot_officer(officer),
            trainer=snapshot_trainer(booking, trainer),
            vehicle=snapshot_vehicle(vehicle),
            booking=snapshot_booking(booking),
            notes=notes,
        ), now)

    def log_vehicle_returned(self, officer: Optional[Actor], booking, vehicle, condition: str,
                             trainer=None, notes: Optional[str] = None,
                             now: Optional[datetime] = None) -> SecurityLogOut:
        returned_at = as_utc(now) if now else utcnow()
        return self.append(SecurityLogCreate(
            type=VEHICLE_RETURNED,
            security_officer=snapshot_officer(officer),
            trainer=snapshot_trainer(booking, trainer),
            vehicle=snapshot_vehicle(vehicle),
            booking=snapshot_booking(booking, actual_return=returned_at),
            notes=notes,
            damage_report=notes if condition == "damaged" else "No damage reported",
        ), returned_at)

    def log_damage_reported(self, booking, vehicle, description: str, trainer=None,
                            officer: Optional[Actor] = None,
                            now: Optional[datetime] = None) -> SecurityLogOut:
        return self.append(SecurityLogCreate(
            type=DAMAGE_REPORTED,
            security_officer=snapshot_officer(officer),
            trainer=snapshot_trainer(booking, trainer),
            vehicle=snapshot_vehicle(vehicle),
            booking=snapshot_booking(booking),
            damage_report=description,
        ), now)

    def log_parts_requested(self, booking, vehicle, description: str, trainer=None,
                            officer: Optional[Actor] = None,
                            now: Optional[datetime] = None) -> SecurityLogOut:
        return self.append(SecurityLogCreate(
            type=PARTS_REQUESTED,
            security_officer=snapshot_officer(officer),
            trainer=snapshot_trainer(booking, trainer),
            vehicle=snapshot_vehicle(vehicle),
            booking=snapshot_booking(booking),
            parts_request=description,
        ), now)


# ── Filtering (pure) ─────────────────────────────────────────────────────────

def _matches_text(entry: SecurityLogOut, term: str) -> bool:
    haystack = (
        entry.trainer.name,
        entry.vehicle.brand,
        entry.vehicle.model,
        entry.vehicle.reg_no,
        entry.booking.booking_ref,
    )
    return any(term in (value or "").lower() for value in haystack)


def filter_entries(actor: Optional[Actor], entries: Iterable[SecurityLogOut],
                   log_filter: SecurityLogFilter, now: datetime) -> list[SecurityLogOut]:
    """Location scope first (from the snapshot), then site, type, date range and free text."""
    start = as_utc(log_filter.start) if log_filter.start else range_start(log_filter.range_label, now)
    end = as_utc(log_filter.end) if log_filter.end else None
    types = set(log_filter.types) if log_filter.types else None
    term = (log_filter.free_text or "").strip().lower()
    site = normalize(log_filter.location) if log_filter.location else None
    if site == ALL:
        site = None

    result = []
    for entry in entries:
        if not can_access_location(actor, entry.booking.location):
            continue
        if site and normalize(entry.booking.location) != site:
            continue
        if types and entry.type not in types:
            continue
        ts = as_utc(entry.timestamp)
        if start and ts < start:
            continue
        if end and ts > end:
            continue
        if term and not _matches_text(entry, term):
            continue
        result.append(entry)
    return result
