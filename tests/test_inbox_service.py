# tests/test_inbox_service.py
"""Tests for the per-user notification inbox and event routing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fleet_portal.exceptions import RecordNotFound
from fleet_portal.models.user import User
from fleet_portal.schemas.actor import Actor
from fleet_portal.services import inbox_service
from fleet_portal.services.inbox_service import InboxService
from conftest import NOW, add_booking, add_vehicle


def add_user(db, role, location, name="Staff", status="active"):
    user = User(name=name, email=f"{name.lower()}@academy.local", role=role, location=location,
                status=status, created_at=NOW, updated_at=NOW)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def reader(user):
    return Actor(role=user.role, home_location=user.location, id=str(user.id))


class TestRouting:
    def test_new_booking_goes_to_site_admins(self, db):
        pune = add_user(db, "admin", "PTC", name="Pune")
        hq = add_user(db, "admin", "ALL", name="HQ")
        ncr = add_user(db, "admin", "NCR", name="Delhi")
        add_user(db, "admin", "Pune", name="Retired", status="inactive")
        booking = add_booking(db, add_vehicle(db))

        inbox = InboxService.for_session(db)
        inbox.route_booking_event(inbox_service.BOOKING_CREATED, booking, "Booking requested", "Asha wants the Octavia")

        assert inbox.unread_count(reader(pune)) == 1
        assert inbox.unread_count(reader(hq)) == 1
        assert inbox.unread_count(reader(ncr)) == 0
        [note] = inbox.for_user(reader(pune))
        assert note.action_url == "/admin/bookings"
        assert note.related_entity_id == str(booking.id)

    def test_approval_goes_to_trainer_and_site_security(self, db):
        guard = add_user(db, "security", "PTC", name="Ravi")
        admin = add_user(db, "admin", "PTC", name="Pune")
        booking = add_booking(db, add_vehicle(db), trainer_id="T-7")

        inbox = InboxService.for_session(db)
        inbox.route_booking_event(inbox_service.BOOKING_APPROVED, booking, "Booking approved", "Ready for pickup")

        trainer = Actor(role="trainer", id="T-7")
        assert [n.action_url for n in inbox.for_user(trainer)] == ["/trainer/bookings"]
        assert [n.action_url for n in inbox.for_user(reader(guard))] == ["/security/keys"]
        assert inbox.for_user(reader(admin)) == []

    def test_repeat_event_replaces_earlier_notification(self, db):
        booking = add_booking(db, add_vehicle(db), trainer_id="T-7")
        trainer = Actor(role="trainer", id="T-7")
        inbox = InboxService.for_session(db)

        inbox.route_booking_event(inbox_service.KEY_ISSUED, booking, "Key issued", "first")
        inbox.mark_all_read(trainer)
        inbox.route_booking_event(inbox_service.KEY_ISSUED, booking, "Key issued", "second")

        [note] = inbox.for_user(trainer)
        assert note.message == "second"
        assert note.read is False


class TestReading:
    def test_mark_read_and_mark_all(self, db):
        inbox = InboxService.for_session(db)
        [first] = inbox.deliver(["u-1"], "booking_created", "A", "a", related_entity_id=1)
        inbox.deliver(["u-1"], "booking_created", "B", "b", related_entity_id=2)
        me = Actor(role="admin", home_location="PTC", id="u-1")

        inbox.mark_read(me, first.id)
        assert inbox.unread_count(me) == 1
        assert inbox.mark_all_read(me) == 1
        assert inbox.unread_count(me) == 0

    def test_other_users_notifications_are_not_found(self, db):
        inbox = InboxService.for_session(db)
        [note] = inbox.deliver(["u-1"], "booking_rejected", "Rejected", "No vehicles free")
        intruder = Actor(role="trainer", id="u-2")
        with pytest.raises(RecordNotFound):
            inbox.mark_read(intruder, note.id)
        with pytest.raises(RecordNotFound):
            inbox.delete(intruder, note.id)

    def test_delete(self, db):
        inbox = InboxService.for_session(db)
        [note] = inbox.deliver(["u-1"], "booking_rejected", "Rejected", "No vehicles free")
        me = Actor(role="trainer", id="u-1")
        inbox.delete(me, note.id)
        assert inbox.for_user(me) == []

    def test_no_actor_has_empty_inbox(self, db):
        inbox = InboxService.for_session(db)
        inbox.deliver(["u-1"], "booking_rejected", "Rejected", "No vehicles free")
        assert inbox.for_user(None) == []
        assert inbox.unread_count(Actor(role="trainer")) == 0
