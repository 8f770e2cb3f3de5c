# tests/test_search_service.py
"""Unit tests for cross-entity search."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fleet_portal.schemas.actor import Actor
from fleet_portal.services.search_service import search

VEHICLES = [
    {"id": 1, "brand": "Skoda", "model": "Octavia", "license_plate": "MH12AB1234", "location": "PTC"},
    {"id": 2, "brand": "Audi", "model": "Q5", "license_plate": "DL3CAF0001", "location": "NCR"},
]
BOOKINGS = [
    {"id": 10, "booking_ref": "BK-00010", "vehicle_id": 1, "trainer_name": "Asha Kulkarni",
     "purpose": "Skoda demo", "requested_location": "PTC"},
    {"id": 11, "booking_ref": "BK-00011", "vehicle_id": 2, "trainer_name": "Rohit Mehra",
     "purpose": "Audi workshop", "requested_location": "NCR"},
]
USERS = [
    {"id": 5, "name": "Asha Kulkarni", "email": "asha@academy.local", "role": "trainer", "location": "PTC"},
]
RECORDS = [
    {"id": 7, "brand": "Skoda", "model": "Octavia", "vehicleRegNo": "MH12AB1234",
     "academyLocation": "Pune", "allocatedTrainer": "Asha Kulkarni"},
]


def run(actor, term, **kwargs):
    return search(actor, term, vehicles=VEHICLES, bookings=BOOKINGS, users=USERS,
                  service_records=RECORDS, **kwargs)


class TestSearch:
    def test_short_term_returns_empty(self):
        response = run(Actor(role="super_admin"), "a")
        assert response.total == 0 and response.results == []

    def test_two_characters_searches(self):
        assert run(Actor(role="super_admin"), "au").total > 0

    def test_no_actor_returns_empty(self):
        assert run(None, "skoda").total == 0

    def test_type_order_and_grouping(self):
        response = run(Actor(role="super_admin"), "skoda")
        assert [r.type for r in response.results] == ["vehicle", "booking", "service-record"]
        assert set(response.groups) == {"vehicle", "booking", "service-record"}

    def test_restricted_records_never_appear(self):
        response = run(Actor(role="admin", home_location="PTC"), "audi")
        assert response.total == 0

    def test_admin_sees_own_location(self):
        response = run(Actor(role="admin", home_location="PTC"), "asha")
        assert {r.type for r in response.results} == {"booking", "user", "service-record"}

    def test_case_insensitive(self):
        assert run(Actor(role="trainer"), "mh12ab").results[0].title == "Skoda Octavia"

    def test_limit_applies_to_combined_list(self):
        response = run(Actor(role="super_admin"), "skoda", limit=2)
        assert [r.type for r in response.results] == ["vehicle", "booking"]
        assert response.total == 2

    def test_booking_subtitle_includes_vehicle(self):
        result = run(Actor(role="super_admin"), "BK-00011").results[0]
        assert result.type == "booking"
        assert result.subtitle == "Audi Q5 - DL3CAF0001 - NCR"

    def test_urls_depend_on_role(self):
        assert run(Actor(role="super_admin"), "octavia").results[0].url == "/super_admin/vehicles"
        assert run(Actor(role="admin", home_location="PTC"), "octavia").results[0].url == "/admin/vehicles"

    def test_search_by_location(self):
        response = run(Actor(role="super_admin"), "ncr")
        assert [r.id for r in response.results if r.type == "vehicle"] == ["2"]
