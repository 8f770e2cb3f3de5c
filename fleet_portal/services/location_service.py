# fleet_portal/services/location_service.py
"""
Location Normalizer: maps academy location names and codes to one canonical code.

Records across the fleet carry locations in two schemes: site codes (PTC, BLR)
and display names (Pune, Bangalore). This module is the single place that
reconciles them. normalize() never raises; input it cannot resolve comes back
lowercased, which matches no code and therefore fails every policy comparison.
"""

from dataclasses import dataclass
from typing import Optional

ALL = "ALL"


@dataclass(frozen=True)
class Location:
    code: str
    name: str          # display name, e.g. "Pune"
    full_name: str     # e.g. "Pune Training Center"
    region: Optional[str] = None


LOCATIONS: tuple[Location, ...] = (
    Location("PTC", "Pune", "Pune Training Center", "West"),
    Location("VGTAP", "VGTAP", "VGTAP Training Center", "North"),
    Location("NCR", "NCR", "NCR Training Center", "North"),
    Location("BLR", "Bangalore", "Bangalore Training Center", "South"),
)

ALL_LOCATIONS = Location(ALL, "All Locations", "All Academy Locations")

CONCRETE_CODES: frozenset[str] = frozenset(loc.code for loc in LOCATIONS)
KNOWN_CODES: frozenset[str] = CONCRETE_CODES | {ALL}

_BY_CODE = {loc.code: loc for loc in (*LOCATIONS, ALL_LOCATIONS)}
_BY_NAME_LOWER = {loc.name.lower(): loc.code for loc in LOCATIONS}

# Legacy spellings seen in imported records. Keys are lowercase.
ALIASES: dict[str, str] = {
    "pune": "PTC",
    "ptc": "PTC",
    "pune training center": "PTC",
    "pun": "PTC",
    "bangalore": "BLR",
    "bengaluru": "BLR",
    "blr": "BLR",
    "bangalore training center": "BLR",
    "vgtap": "VGTAP",
    "vgt": "VGTAP",
    "vgtap training center": "VGTAP",
    "ncr": "NCR",
    "ncr training center": "NCR",
    "delhi": "NCR",
    "new delhi": "NCR",
    "gurgaon": "NCR",
    "gurugram": "NCR",
    "all": ALL,
}


def normalize(raw: Optional[str]) -> str:
    """
    Resolve a location code or name to its canonical code.

    Order: exact code → case-insensitive display name → alias table →
    lowercased input (unrecognized). Empty input gives "".
    """
    if raw is None:
        return ""
    value = str(raw).strip()
    if not value:
        return ""

    if value in KNOWN_CODES:
        return value

    lowered = value.lower()
    if lowered in _BY_NAME_LOWER:
        return _BY_NAME_LOWER[lowered]

    if lowered in ALIASES:
        return ALIASES[lowered]

    return lowered


def is_concrete(raw: Optional[str]) -> bool:
    """True if `raw` resolves to one of the four site codes (not ALL)."""
    return normalize(raw) in CONCRETE_CODES


def require_concrete(raw: Optional[str]) -> str:
    """
    Normalize a location that is about to be written to a record.
    Raises ValueError for ALL or anything unrecognized; pydantic validators
    turn that into a 422 for API input.
    """
    code = normalize(raw)
    if code not in CONCRETE_CODES:
        allowed = ", ".join(sorted(CONCRETE_CODES))
        raise ValueError(f"Unknown academy location '{raw}' (expected one of {allowed})")
    return code


def get_location(code: str) -> Optional[Location]:
    return _BY_CODE.get(normalize(code))


def display_name(raw: Optional[str]) -> str:
    """Display name for a location, falling back to the raw string."""
    loc = get_location(raw or "")
    return loc.name if loc else (raw or "")


def full_name(raw: Optional[str]) -> str:
    loc = get_location(raw or "")
    return loc.full_name if loc else (raw or "")
