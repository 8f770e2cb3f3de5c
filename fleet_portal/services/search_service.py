# fleet_portal/services/search_service.py
"""
Cross-entity search across vehicles, bookings, users and service records.

Each collection is location-filtered for the actor BEFORE any matching, so a
restricted record can never influence results, ordering or counts. Matching is a
case-insensitive substring test; there is no relevance scoring. Results keep
repository order within a type, types come in a fixed order, and the combined
list is capped.
"""

from typing import Any, Optional, Sequence

from fleet_portal.config import settings
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.search import SearchResponse, SearchResult
from fleet_portal.services.access_policy import SUPER_ADMIN, filter_records
from fleet_portal.utils.logger import get_logger
from fleet_portal.utils.record_fields import get_field, get_location, get_reg_no, text_of

logger = get_logger(__name__)

RESULT_TYPES = ("vehicle", "booking", "user", "service-record")


def _url(actor: Actor, section: str) -> str:
    prefix = "/super_admin" if actor.role == SUPER_ADMIN else "/admin"
    return f"{prefix}/{section}"


def _vehicle_label(vehicle: Any) -> str:
    return f"{get_field(vehicle, 'brand', default='')} {get_field(vehicle, 'model', default='')}".strip()


def _match_vehicles(actor, vehicles, term) -> list[SearchResult]:
    results = []
    for v in vehicles:
        fields = (
            (get_reg_no(v) or "").lower(),
            text_of(v, "brand"),
            text_of(v, "model"),
            text_of(v, "name"),
            (get_location(v) or "").lower(),
        )
        if any(term in f for f in fields):
            results.append(SearchResult(
                id=str(get_field(v, "id", default="")),
                type="vehicle",
                title=_vehicle_label(v),
                subtitle=f"{get_reg_no(v) or 'N/A'} - {get_location(v) or 'N/A'}",
                url=_url(actor, "vehicles"),
            ))
    return results


def _match_bookings(actor, bookings, vehicles, term) -> list[SearchResult]:
    vehicles_by_id = {str(get_field(v, "id")): v for v in vehicles}
    results = []
    for b in bookings:
        fields = (
            text_of(b, "trainer_name", "trainerName"),
            text_of(b, "purpose"),
            text_of(b, "id"),
            text_of(b, "booking_ref", "bookingRef"),
            (get_location(b) or "").lower(),
        )
        if any(term in f for f in fields):
            vehicle = vehicles_by_id.get(str(get_field(b, "vehicle_id", "vehicleId")))
            vehicle_info = (f"{_vehicle_label(vehicle)} - {get_reg_no(vehicle) or 'N/A'}"
                            if vehicle is not None else "Unknown Vehicle")
            section = "reports" if actor.role == SUPER_ADMIN else "bookings"
            results.append(SearchResult(
                id=str(get_field(b, "id", default="")),
                type="booking",
                title=get_field(b, "trainer_name", "trainerName", default="Unknown Trainer"),
                subtitle=f"{vehicle_info} - {get_location(b) or 'N/A'}",
                url=_url(actor, section),
            ))
    return results


def _match_users(actor, users, term) -> list[SearchResult]:
    results = []
    for u in users:
        fields = (
            text_of(u, "name"),
            text_of(u, "email"),
            text_of(u, "employee_id", "employeeId"),
            text_of(u, "department"),
        )
        if any(term in f for f in fields):
            results.append(SearchResult(
                id=str(get_field(u, "id", default="")),
                type="user",
                title=get_field(u, "name", default="Unknown User"),
                subtitle=f"{get_field(u, 'email', default='N/A')} - {get_field(u, 'role', default='N/A')}",
                url=_url(actor, "users"),
            ))
    return results


def _match_service_records(actor, records, term) -> list[SearchResult]:
    results = []
    for r in records:
        fields = (
            (get_reg_no(r) or "").lower(),
            text_of(r, "brand"),
            text_of(r, "model"),
            text_of(r, "allocated_trainer", "allocatedTrainer"),
        )
        if any(term in f for f in fields):
            results.append(SearchResult(
                id=str(get_field(r, "id", default="")),
                type="service-record",
                title=_vehicle_label(r),
                subtitle=f"{get_reg_no(r) or 'N/A'} - "
                         f"{get_field(r, 'allocated_trainer', 'allocatedTrainer', default='Unallocated')}",
                url="/admin/service-records",
            ))
    return results


def _empty(term: str) -> SearchResponse:
    return SearchResponse(term=term, total=0, results=[], groups={})


def search(actor: Optional[Actor], term: str,
           vehicles: Sequence = (), bookings: Sequence = (),
           users: Sequence = (), service_records: Sequence = (),
           limit: Optional[int] = None, min_length: Optional[int] = None) -> SearchResponse:
    """
    Search every collection the actor can see.
    Terms shorter than the minimum length return an empty response, not an error.
    """
    limit = settings.SEARCH_RESULT_LIMIT if limit is None else limit
    min_length = settings.SEARCH_MIN_TERM_LENGTH if min_length is None else min_length

    term = (term or "").strip()
    if actor is None or len(term) < min_length:
        return _empty(term)
    needle = term.lower()

    # Filter first, then match.
    visible_vehicles = filter_records(actor, vehicles)
    visible_bookings = filter_records(actor, bookings)
    visible_users = filter_records(actor, users)
    visible_records = filter_records(actor, service_records)

    matches = (
        _match_vehicles(actor, visible_vehicles, needle)
        + _match_bookings(actor, visible_bookings, visible_vehicles, needle)
        + _match_users(actor, visible_users, needle)
        + _match_service_records(actor, visible_records, needle)
    )
    results = matches[:limit]

    groups: dict[str, list[SearchResult]] = {}
    for result_type in RESULT_TYPES:
        grouped = [r for r in results if r.type == result_type]
        if grouped:
            groups[result_type] = grouped

    logger.debug(f"Search '{term}' by {actor.role}: {len(matches)} matches, returning {len(results)}")
    return SearchResponse(term=term, total=len(results), results=results, groups=groups)
