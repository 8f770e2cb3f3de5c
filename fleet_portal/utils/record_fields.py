# fleet_portal/utils/record_fields.py
"""
Field-name reconciliation for records coming from different sources.

Records reach the core either as ORM objects (snake_case attributes) or as
plain dicts imported from older exports (camelCase keys, several spellings of
the same field). Everything that reads a record goes through these helpers
instead of guessing field names inline.
"""

from typing import Any

# Every spelling a record's location has been stored under, in lookup order.
LOCATION_FIELDS = (
    "location",
    "academy_location",
    "academyLocation",
    "requested_location",
    "requestedLocation",
)

REG_NO_FIELDS = ("license_plate", "licensePlate", "vehicle_reg_no", "vehicleRegNo", "reg_no", "regNo")


def get_field(record: Any, *names: str, default: Any = None) -> Any:
    """
    Return the first non-empty value found under any of `names`.
    Works for dicts and attribute objects alike.
    """
    for name in names:
        if isinstance(record, dict):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None and value != "":
            return value
    return default


def get_location(record: Any) -> str | None:
    """Raw (un-normalized) location of a record, or None if it has none."""
    return get_field(record, *LOCATION_FIELDS)


def get_reg_no(record: Any) -> str | None:
    return get_field(record, *REG_NO_FIELDS)


def text_of(record: Any, *names: str) -> str:
    """Lowercased string value for substring matching; '' when absent."""
    value = get_field(record, *names, default="")
    return str(value).lower()
