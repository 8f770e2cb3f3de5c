# fleet_portal/services/booking_state.py
"""
Booking State Derivation.

Stored booking status only ever moves forward:

    pending ──► approved ──► active ──► completed
       │  │         │
       │  └► rejected
       └────────────┴──► cancelled

Presentation facets (overdue, ready-for-pickup, in-use) are never stored. They
are recomputed on every read from the stored status, the booking's start/end
and an explicit `now`, so a single request sees one consistent clock reading.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fleet_portal.utils.record_fields import get_field
from fleet_portal.utils.time_utils import as_utc

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
ACTIVE = "active"
COMPLETED = "completed"
CANCELLED = "cancelled"

BOOKING_STATUSES = (PENDING, APPROVED, REJECTED, ACTIVE, COMPLETED, CANCELLED)
TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED, REJECTED})

TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({APPROVED, REJECTED, CANCELLED}),
    APPROVED: frozenset({ACTIVE, CANCELLED}),
    ACTIVE: frozenset({COMPLETED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
    REJECTED: frozenset(),
}

OVERDUE = "overdue"
READY_FOR_PICKUP = "ready_for_pickup"


@dataclass(frozen=True)
class BookingFacets:
    is_overdue: bool
    is_ready_for_pickup: bool
    is_in_use: bool


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def derive_facets(booking: Any, now: datetime) -> BookingFacets:
    """
    Compute display facets for a booking at instant `now`.

    overdue          ⇔ active   and end   <  now  (strict: due exactly now is not late)
    ready-for-pickup ⇔ approved and start <= now
    in-use           ⇔ active
    """
    now = as_utc(now)
    status = get_field(booking, "status")
    start = as_utc(get_field(booking, "start_date", "startDate"))
    end = as_utc(get_field(booking, "end_date", "endDate"))

    in_use = status == ACTIVE
    return BookingFacets(
        is_overdue=in_use and end is not None and end < now,
        is_ready_for_pickup=status == APPROVED and start is not None and start <= now,
        is_in_use=in_use,
    )


def display_status(booking: Any, now: datetime) -> str:
    """Stored status, overridden by 'overdue' / 'ready_for_pickup' when they apply."""
    facets = derive_facets(booking, now)
    if facets.is_overdue:
        return OVERDUE
    if facets.is_ready_for_pickup:
        return READY_FOR_PICKUP
    return get_field(booking, "status", default="")
