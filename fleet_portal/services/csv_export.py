# fleet_portal/services/csv_export.py
"""
CSV export of the security log.

Column order is fixed. Cells holding a comma, quote or newline are wrapped in
double quotes with inner quotes doubled (csv.QUOTE_MINIMAL), and the document
starts with a UTF-8 byte-order mark so spreadsheet apps pick the right encoding.
"""

import csv
import io
from datetime import date
from typing import Iterable, Optional

from fleet_portal.schemas.security_log import SecurityLogOut
from fleet_portal.services.location_service import display_name, is_concrete
from fleet_portal.utils.time_utils import as_utc

BOM = "\ufeff"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

HEADERS = [
    "Type",
    "Timestamp",
    "Security Officer",
    "Trainer",
    "Vehicle Brand",
    "Vehicle Model",
    "Registration No",
    "Booking Ref",
    "Purpose",
    "Expected Return Date",
    "Actual Return Date",
    "Return/Damage Notes",
    "Location",
]


def _date_cell(value: Optional[str], fmt: str = DATE_FORMAT) -> str:
    dt = as_utc(value)
    if dt is None:
        return value or ""
    return dt.strftime(fmt)


def _notes_cell(entry: SecurityLogOut) -> str:
    return entry.damage_report or entry.notes or entry.parts_request or ""


def _location_cell(location: str) -> str:
    return display_name(location) if is_concrete(location) else location


def log_row(entry: SecurityLogOut) -> list[str]:
    return [
        entry.type,
        as_utc(entry.timestamp).strftime(TIMESTAMP_FORMAT),
        entry.security_officer.name,
        entry.trainer.name,
        entry.vehicle.brand,
        entry.vehicle.model,
        entry.vehicle.reg_no,
        entry.booking.booking_ref,
        entry.booking.purpose,
        _date_cell(entry.booking.expected_return_date),
        _date_cell(entry.booking.actual_return_date),
        _notes_cell(entry),
        _location_cell(entry.booking.location),
    ]


def build_csv(entries: Iterable[SecurityLogOut]) -> str:
    """Render entries as BOM-prefixed CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADERS)
    for entry in entries:
        writer.writerow(log_row(entry))
    return BOM + buffer.getvalue()


def export_filename(range_label: Optional[str], today: date) -> str:
    """security_logs_<RangeLabel>_<yyyy-MM-dd>.csv"""
    return f"security_logs_{range_label or 'All_Time'}_{today.strftime(DATE_FORMAT)}.csv"
