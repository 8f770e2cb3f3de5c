# fleet_portal/utils/time_utils.py
"""
Timestamp helpers. All comparisons in the core happen on timezone-aware UTC
datetimes; naive values (SQLite drops tzinfo) are read as UTC.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Union[datetime, str, None]) -> Optional[datetime]:
    """
    Coerce a datetime or ISO-8601 string to an aware UTC datetime.
    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: Union[datetime, str, None]) -> Optional[str]:
    """ISO-8601 string in UTC, or None."""
    dt = as_utc(value)
    return dt.isoformat() if dt else None
