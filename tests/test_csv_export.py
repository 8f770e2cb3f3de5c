# tests/test_csv_export.py
"""Unit tests for the security log CSV export."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import csv
import io
from datetime import date, datetime, timezone
from fleet_portal.schemas.security_log import (
    BookingSnapshot,
    OfficerSnapshot,
    SecurityLogOut,
    TrainerSnapshot,
    VehicleSnapshot,
)
from fleet_portal.services.csv_export import BOM, HEADERS, build_csv, export_filename, log_row


def make_entry(trainer_name="Asha Kulkarni", location="PTC", **overrides):
    fields = dict(
        id="5b0c8f3e-2d4a-4c1e-9a57-0f6e2b1d7c44",
        type="Vehicle Returned",
        timestamp=datetime(2024, 6, 1, 14, 5, 9, tzinfo=timezone.utc),
        security_officer=OfficerSnapshot(id="sec-1", name="Ravi Guard", email="ravi@academy.local"),
        trainer=TrainerSnapshot(id="T-7", name=trainer_name),
        vehicle=VehicleSnapshot(id="3", brand="Skoda", model="Octavia", reg_no="MH12AB1234"),
        booking=BookingSnapshot(
            id="1", booking_ref="BK-00001", purpose="Demo",
            start_date="2024-05-30T09:00:00+00:00", end_date="2024-06-01T09:00:00+00:00",
            expected_return_date="2024-06-01T09:00:00+00:00", actual_return_date="2024-06-01T14:05:09+00:00",
            location=location,
        ),
        damage_report="No damage reported",
    )
    fields.update(overrides)
    return SecurityLogOut(**fields)


class TestCsvExport:
    def test_starts_with_bom_and_header(self):
        text = build_csv([])
        assert text.startswith(BOM)
        assert text[len(BOM):].split("\n")[0] == ",".join(HEADERS)

    def test_row_values(self):
        row = log_row(make_entry())
        assert row[0] == "Vehicle Returned"
        assert row[1] == "2024-06-01 14:05:09"
        assert row[6] == "MH12AB1234"
        assert row[9] == "2024-06-01"
        assert row[10] == "2024-06-01"
        assert row[11] == "No damage reported"
        assert row[12] == "Pune"

    def test_unrecognized_location_kept_as_is(self):
        assert log_row(make_entry(location="Unknown"))[12] == "Unknown"

    def test_comma_and_quote_are_escaped(self):
        text = build_csv([make_entry(trainer_name='O\'Brien, J. "Jim"')])
        line = text.split("\n")[1]
        assert '"O\'Brien, J. ""Jim"""' in line

    def test_cell_with_comma_is_quoted(self):
        line = build_csv([make_entry(trainer_name="O'Brien, J.")]).split("\n")[1]
        assert ",\"O'Brien, J.\"," in line

    def test_parses_back_to_same_cells(self):
        entry = make_entry(trainer_name="O'Brien, J.", notes="line one\nline two", damage_report=None)
        rows = list(csv.reader(io.StringIO(build_csv([entry])[len(BOM):])))
        assert rows[1][3] == "O'Brien, J."
        assert rows[1][11] == "line one\nline two"

    def test_rows_joined_with_newline(self):
        text = build_csv([make_entry(), make_entry()])
        assert "\r\n" not in text
        assert text.count("\n") == 3

    def test_missing_actual_return_is_blank(self):
        entry = make_entry(type="Key Issued", damage_report=None, booking=BookingSnapshot(id="1", booking_ref="BK-00001"))
        row = log_row(entry)
        assert row[10] == ""
        assert row[11] == ""


class TestExportFilename:
    def test_filename(self):
        assert export_filename("Last_Month", date(2024, 6, 1)) == "security_logs_Last_Month_2024-06-01.csv"

    def test_defaults_to_all_time(self):
        assert export_filename(None, date(2024, 6, 1)) == "security_logs_All_Time_2024-06-01.csv"
