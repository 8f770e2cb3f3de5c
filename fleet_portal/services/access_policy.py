# fleet_portal/services/access_policy.py
"""
Access Policy Engine. Decides which records an actor may see and act upon.

Rules, first match wins:
  1. no actor                 → deny
  2. super_admin              → allow everything
  3. trainer                  → allow everything (trainers book across sites)
  4. admin / security         → allow iff the record's location normalizes to the
                                actor's home location, or home location is ALL;
                                records without a location are denied
  5. any other role           → deny

Everything here is a pure function of (actor, record). Denial is silent: callers
filter, they never raise, so an actor cannot learn that a hidden record exists.
"""

from typing import Any, Iterable, Optional, TypeVar

from fleet_portal.schemas.actor import Actor
from fleet_portal.services.location_service import ALL, CONCRETE_CODES, LOCATIONS, normalize
from fleet_portal.utils.record_fields import get_location

SUPER_ADMIN = "super_admin"
ADMIN = "admin"
TRAINER = "trainer"
SECURITY = "security"

UNRESTRICTED_ROLES = frozenset({SUPER_ADMIN, TRAINER})
LOCATION_SCOPED_ROLES = frozenset({ADMIN, SECURITY})

T = TypeVar("T")


def is_location_restricted(actor: Optional[Actor]) -> bool:
    return actor is not None and actor.role in LOCATION_SCOPED_ROLES


def can_access_location(actor: Optional[Actor], location: Optional[str]) -> bool:
    """Policy decision for a bare location value."""
    if actor is None:
        return False
    if actor.role in UNRESTRICTED_ROLES:
        return True
    if actor.role in LOCATION_SCOPED_ROLES:
        if not location:
            return False
        home = normalize(actor.home_location)
        if home == ALL:
            return True
        return home in CONCRETE_CODES and home == normalize(location)
    return False


def can_access(actor: Optional[Actor], record: Any) -> bool:
    """Policy decision for a single record (dict or ORM object)."""
    return can_access_location(actor, get_location(record))


def filter_records(actor: Optional[Actor], records: Iterable[T]) -> list[T]:
    """Stable filter: keeps the records `actor` may see, in their original order."""
    if actor is None:
        return []
    return [r for r in records if can_access(actor, r)]


def allowed_locations(actor: Optional[Actor]) -> list[str]:
    """Concrete site codes visible to the actor (used for dropdowns and reports)."""
    if actor is None:
        return []
    all_codes = [loc.code for loc in LOCATIONS]
    if actor.role in UNRESTRICTED_ROLES:
        return all_codes
    if actor.role in LOCATION_SCOPED_ROLES:
        home = normalize(actor.home_location)
        if home == ALL:
            return all_codes
        return [home] if home in all_codes else []
    return []
