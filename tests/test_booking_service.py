# tests/test_booking_service.py
"""Tests for the booking workflow."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, patch
from fleet_portal.exceptions import ActionNotAllowed, DataAccessError, RecordNotFound, ValidationError
from fleet_portal.models.booking import Booking
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.booking import BookingCreate
from fleet_portal.services import booking_service
from fleet_portal.services.inbox_service import InboxService
from fleet_portal.services.security_log_service import SecurityLogService
from conftest import NOW, add_booking, add_vehicle


def booking_request(vehicle_id, **overrides):
    fields = {"vehicleId": vehicle_id, "startDate": NOW + timedelta(days=1), "endDate": NOW + timedelta(days=2),
              "purpose": "Customer demo drive"}
    fields.update(overrides)
    return BookingCreate(**fields)


@pytest.fixture(autouse=True)
def quiet_notify():
    with patch("fleet_portal.services.booking_service.notify", new_callable=AsyncMock) as mock_notify:
        yield mock_notify


class TestRequestBooking:
    @pytest.mark.asyncio
    async def test_trainer_requests_booking(self, db, trainer, quiet_notify):
        vehicle = add_vehicle(db)
        booking = await booking_service.request_booking(db, trainer, booking_request(vehicle.id))
        assert booking.status == "pending"
        assert booking.trainer_id == "T-7"
        assert booking.trainer_name == "Asha Kulkarni"
        assert booking.requested_location == "PTC"
        assert booking.booking_ref == f"BK-{booking.id:05d}"
        quiet_notify.assert_called_once()

    @pytest.mark.asyncio
    async def test_vehicle_in_maintenance_cannot_be_booked(self, db, trainer):
        vehicle = add_vehicle(db, status="Maintenance")
        with pytest.raises(ValidationError):
            await booking_service.request_booking(db, trainer, booking_request(vehicle.id))

    @pytest.mark.asyncio
    async def test_security_cannot_request(self, db, pune_security):
        vehicle = add_vehicle(db)
        with pytest.raises(ActionNotAllowed):
            await booking_service.request_booking(db, pune_security, booking_request(vehicle.id))

    @pytest.mark.asyncio
    async def test_admin_cannot_book_vehicle_at_other_site(self, db, pune_admin):
        vehicle = add_vehicle(db, location="NCR")
        with pytest.raises(RecordNotFound):
            await booking_service.request_booking(db, pune_admin, booking_request(vehicle.id))

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            booking_request(1, endDate=NOW)


class TestApproval:
    @pytest.mark.asyncio
    async def test_admin_approves(self, db, pune_admin):
        booking = add_booking(db, add_vehicle(db))
        approved = await booking_service.approve_booking(db, pune_admin, booking.id)
        assert approved.status == "approved"

    @pytest.mark.asyncio
    async def test_trainer_cannot_approve(self, db, trainer):
        booking = add_booking(db, add_vehicle(db))
        with pytest.raises(ActionNotAllowed):
            await booking_service.approve_booking(db, trainer, booking.id)

    @pytest.mark.asyncio
    async def test_other_site_admin_gets_not_found(self, db, ncr_admin):
        booking = add_booking(db, add_vehicle(db))
        with pytest.raises(RecordNotFound):
            await booking_service.approve_booking(db, ncr_admin, booking.id)

    @pytest.mark.asyncio
    async def test_completed_booking_cannot_be_approved(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db), status="completed")
        with pytest.raises(ValidationError):
            await booking_service.approve_booking(db, super_admin, booking.id)

    @pytest.mark.asyncio
    async def test_reject(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db))
        rejected = await booking_service.reject_booking(db, super_admin, booking.id, notes="Vehicle needed for audit")
        assert rejected.status == "rejected"
        assert rejected.notes == "Vehicle needed for audit"


class TestCancel:
    @pytest.mark.asyncio
    async def test_trainer_cancels_own_booking(self, db, trainer):
        booking = add_booking(db, add_vehicle(db), trainer_id="T-7")
        assert (await booking_service.cancel_booking(db, trainer, booking.id)).status == "cancelled"

    @pytest.mark.asyncio
    async def test_trainer_cannot_cancel_someone_elses(self, db, trainer):
        booking = add_booking(db, add_vehicle(db), trainer_id="T-99")
        with pytest.raises(ActionNotAllowed):
            await booking_service.cancel_booking(db, trainer, booking.id)

    @pytest.mark.asyncio
    async def test_active_booking_cannot_be_cancelled(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db), status="active")
        with pytest.raises(ValidationError):
            await booking_service.cancel_booking(db, super_admin, booking.id)


class TestHandover:
    @pytest.mark.asyncio
    async def test_issue_key_activates_and_logs(self, db, pune_security):
        vehicle = add_vehicle(db)
        booking = add_booking(db, vehicle, status="approved")

        active = await booking_service.issue_key(db, pune_security, booking.id, notes="Full tank", now=NOW)

        assert active.status == "active"
        assert db.get(Vehicle, vehicle.id).status == "Booked"
        [entry] = SecurityLogService.for_session(db).all_entries()
        assert entry.type == "Key Issued"
        assert entry.security_officer.name == "Ravi Guard"
        assert entry.vehicle.reg_no == "MH12AB1234"
        assert entry.booking.location == "PTC"
        assert entry.notes == "Full tank"

    @pytest.mark.asyncio
    async def test_key_cannot_be_issued_for_pending(self, db, pune_security):
        booking = add_booking(db, add_vehicle(db))
        with pytest.raises(ValidationError):
            await booking_service.issue_key(db, pune_security, booking.id)
        assert SecurityLogService.for_session(db).all_entries() == []

    @pytest.mark.asyncio
    async def test_good_return_frees_vehicle(self, db, pune_security):
        vehicle = add_vehicle(db, status="Booked")
        booking = add_booking(db, vehicle, status="active")

        done = await booking_service.return_vehicle(db, pune_security, booking.id, "good", now=NOW)

        assert done.status == "completed"
        assert db.get(Vehicle, vehicle.id).status == "Available"
        [entry] = SecurityLogService.for_session(db).all_entries()
        assert entry.type == "Vehicle Returned"
        assert entry.damage_report == "No damage reported"

    @pytest.mark.asyncio
    async def test_damaged_return_sends_vehicle_to_maintenance(self, db, pune_security):
        vehicle = add_vehicle(db, status="Booked")
        booking = add_booking(db, vehicle, status="active")

        await booking_service.return_vehicle(db, pune_security, booking.id, "damaged", notes="Dent on rear door")

        assert db.get(Vehicle, vehicle.id).status == "Maintenance"
        [entry] = SecurityLogService.for_session(db).all_entries()
        assert entry.damage_report == "Dent on rear door"

    @pytest.mark.asyncio
    async def test_damaged_return_needs_notes(self, db, pune_security):
        booking = add_booking(db, add_vehicle(db), status="active")
        with pytest.raises(ValidationError):
            await booking_service.return_vehicle(db, pune_security, booking.id, "damaged")

    @pytest.mark.asyncio
    async def test_log_failure_undoes_key_issue(self, db, pune_security, quiet_notify):
        vehicle = add_vehicle(db)
        booking = add_booking(db, vehicle, status="approved")

        with patch.object(SecurityLogService, "append", side_effect=DataAccessError("store down")):
            with pytest.raises(DataAccessError):
                await booking_service.issue_key(db, pune_security, booking.id)

        assert db.get(Booking, booking.id).status == "approved"
        assert db.get(Vehicle, vehicle.id).status == "Available"
        assert SecurityLogService.for_session(db).all_entries() == []
        quiet_notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_log_failure_undoes_return(self, db, pune_security):
        vehicle = add_vehicle(db, status="Booked")
        booking = add_booking(db, vehicle, status="active")

        with patch.object(SecurityLogService, "append", side_effect=DataAccessError("store down")):
            with pytest.raises(DataAccessError):
                await booking_service.return_vehicle(db, pune_security, booking.id, "good")

        assert db.get(Booking, booking.id).status == "active"
        assert db.get(Vehicle, vehicle.id).status == "Booked"


class TestIncidents:
    @pytest.mark.asyncio
    async def test_trainer_damage_report_logged_by_system(self, db, trainer):
        booking = add_booking(db, add_vehicle(db), status="active")
        entry = await booking_service.report_damage(db, trainer, booking.id, "Cracked windscreen", now=NOW)
        assert entry.type == "Damage Reported"
        assert entry.security_officer.id == "system"
        assert entry.damage_report == "Cracked windscreen"

    @pytest.mark.asyncio
    async def test_parts_request_by_security(self, db, pune_security):
        booking = add_booking(db, add_vehicle(db), status="active")
        entry = await booking_service.request_parts(db, pune_security, booking.id, "Wiper blades")
        assert entry.type == "Parts Requested"
        assert entry.security_officer.name == "Ravi Guard"
        assert entry.parts_request == "Wiper blades"


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_dispatches_to_workflow_step(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db))
        assert (await booking_service.update_status(db, super_admin, booking.id, "approved")).status == "approved"

    @pytest.mark.asyncio
    async def test_pending_is_not_a_target(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db), status="approved")
        with pytest.raises(ValidationError):
            await booking_service.update_status(db, super_admin, booking.id, "pending")

    @pytest.mark.asyncio
    async def test_delete_keeps_security_log(self, db, super_admin):
        booking = add_booking(db, add_vehicle(db), status="approved")
        await booking_service.issue_key(db, super_admin, booking.id)
        booking_service.delete_booking(db, super_admin, booking.id)
        assert len(SecurityLogService.for_session(db).all_entries()) == 1

    def test_trainer_cannot_delete(self, db, trainer):
        booking = add_booking(db, add_vehicle(db))
        with pytest.raises(ActionNotAllowed):
            booking_service.delete_booking(db, trainer, booking.id)


class TestInboxDelivery:
    @pytest.mark.asyncio
    async def test_approval_lands_in_trainer_inbox(self, db, pune_admin, trainer):
        booking = add_booking(db, add_vehicle(db), trainer_id="T-7")
        await booking_service.approve_booking(db, pune_admin, booking.id)

        [note] = InboxService.for_session(db).for_user(trainer)
        assert note.type == "booking_approved"
        assert note.related_entity_id == str(booking.id)

    @pytest.mark.asyncio
    async def test_inbox_failure_does_not_fail_the_step(self, db, pune_admin, quiet_notify):
        booking = add_booking(db, add_vehicle(db))
        with patch.object(InboxService, "route_booking_event", side_effect=DataAccessError("store down")):
            approved = await booking_service.approve_booking(db, pune_admin, booking.id)
        assert approved.status == "approved"
        quiet_notify.assert_called_once()
