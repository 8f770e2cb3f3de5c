# fleet_portal/services/dashboard_service.py
"""Per-actor dashboard counts, computed from the filtered and derived view."""

from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.dashboard import DashboardStats
from fleet_portal.services import booking_state
from fleet_portal.services.access_policy import allowed_locations, filter_records
from fleet_portal.utils.record_fields import get_field


def build_dashboard(actor: Optional[Actor], vehicles: Sequence, bookings: Sequence,
                    now: datetime) -> DashboardStats:
    visible_vehicles = filter_records(actor, vehicles)
    visible_bookings = filter_records(actor, bookings)

    facets = [(b, booking_state.derive_facets(b, now)) for b in visible_bookings]
    overdue = [b for b, f in facets if f.is_overdue]

    return DashboardStats(
        generated_at=now,
        role=actor.role if actor else "",
        location=actor.home_location if actor else None,
        locations=allowed_locations(actor),
        total_vehicles=len(visible_vehicles),
        vehicles_by_status=dict(Counter(get_field(v, "status", default="Unknown") for v in visible_vehicles)),
        total_bookings=len(visible_bookings),
        bookings_by_status=dict(Counter(get_field(b, "status", default="") for b in visible_bookings)),
        pending_approvals=sum(1 for b in visible_bookings if get_field(b, "status") == booking_state.PENDING),
        ready_for_pickup=sum(1 for _, f in facets if f.is_ready_for_pickup),
        in_use=sum(1 for _, f in facets if f.is_in_use),
        overdue=len(overdue),
        overdue_booking_ids=[get_field(b, "id") for b in overdue],
    )
