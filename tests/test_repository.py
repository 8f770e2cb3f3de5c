# tests/test_repository.py
"""Tests for the SQL data-access layer and the location-scoped repository."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from fleet_portal.exceptions import DataAccessError, RecordNotFound, ValidationError
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.models.user import User
from fleet_portal.schemas.parts_order import PartsOrderUpdate
from fleet_portal.schemas.service_record import ServiceRecordUpdate
from fleet_portal.schemas.trainer import TrainerUpdate
from fleet_portal.schemas.vehicle import VehicleUpdate
from fleet_portal.services.repository import Repository, SqlDataAccess, repository_for, unit_of_work

VEHICLE = {"brand": "Skoda", "model": "Octavia", "year": 2022, "license_plate": "MH12AB1234", "location": "PTC"}


class TestSqlDataAccess:
    def test_create_assigns_id_and_timestamps(self, db):
        record = SqlDataAccess(db, Vehicle).create(dict(VEHICLE))
        assert record.id is not None
        assert record.created_at is not None
        assert record.updated_at == record.created_at

    def test_update_refreshes_updated_at(self, db):
        access = SqlDataAccess(db, Vehicle)
        record = access.create(dict(VEHICLE))
        created = record.created_at
        updated = access.update(record.id, {"mileage": 1200})
        assert updated.mileage == 1200
        assert updated.updated_at >= created

    def test_update_missing_raises_not_found(self, db):
        with pytest.raises(RecordNotFound):
            SqlDataAccess(db, Vehicle).update(999, {"mileage": 1})

    def test_store_failure_becomes_data_access_error(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        with pytest.raises(DataAccessError):
            SqlDataAccess(db, Vehicle).fetch_all()
        db.rollback.assert_called_once()

    def test_commit_failure_rolls_back(self):
        db = MagicMock(info={})
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        with pytest.raises(DataAccessError):
            SqlDataAccess(db, Vehicle).create(dict(VEHICLE))
        db.rollback.assert_called_once()


class TestRepository:
    def test_failed_refresh_keeps_previous_records(self):
        access = MagicMock()
        access.fetch_all.return_value = [{"id": 1, "location": "PTC"}]
        repo = Repository(access)
        assert repo.refresh()

        access.fetch_all.side_effect = DataAccessError("connection reset")
        assert not repo.refresh()
        assert repo.records == [{"id": 1, "location": "PTC"}]
        assert repo.error == "connection reset"

    def test_load_raises_when_store_down(self):
        access = MagicMock()
        access.fetch_all.side_effect = DataAccessError("timeout")
        with pytest.raises(DataAccessError):
            Repository(access).load()

    def test_visible_filters_by_actor(self, db, pune_admin, super_admin):
        repo = repository_for(db, Vehicle)
        repo.create(super_admin, dict(VEHICLE))
        repo.create(super_admin, dict(VEHICLE, license_plate="DL3CAF0001", location="NCR"))
        repo.load()
        assert [v.location for v in repo.visible(pune_admin)] == ["PTC"]
        assert len(repo.visible(super_admin)) == 2

    def test_hidden_record_looks_missing(self, db, pune_admin, super_admin):
        repo = repository_for(db, Vehicle)
        ncr = repo.create(super_admin, dict(VEHICLE, location="NCR"))
        with pytest.raises(RecordNotFound):
            repo.find(pune_admin, ncr.id)
        with pytest.raises(RecordNotFound):
            repo.update(pune_admin, ncr.id, {"mileage": 10})
        with pytest.raises(RecordNotFound):
            repo.delete(pune_admin, ncr.id)

    def test_write_outside_home_location_rejected(self, db, pune_admin):
        repo = repository_for(db, Vehicle)
        with pytest.raises(ValidationError):
            repo.create(pune_admin, dict(VEHICLE, location="NCR"))
        assert repo.load() == []

    def test_moving_record_out_of_scope_rejected(self, db, pune_admin):
        repo = repository_for(db, Vehicle)
        vehicle = repo.create(pune_admin, dict(VEHICLE))
        with pytest.raises(ValidationError):
            repo.update(pune_admin, vehicle.id, {"location": "BLR"})

    def test_clearing_required_location_is_validation_error(self, db, super_admin):
        repo = repository_for(db, Vehicle)
        vehicle = repo.create(super_admin, dict(VEHICLE))
        with pytest.raises(ValidationError) as exc:
            repo.update(super_admin, vehicle.id, {"location": None})
        assert exc.value.field == "location"
        assert db.get(Vehicle, vehicle.id).location == "PTC"

    def test_users_may_be_unassigned(self, db, super_admin):
        user = repository_for(db, User).create(super_admin, {"name": "HQ", "email": "hq@academy.local",
                                                               "role": "super_admin", "location": None})
        assert user.location is None

    def test_delete_removes_from_view(self, db, super_admin):
        repo = repository_for(db, Vehicle)
        vehicle = repo.create(super_admin, dict(VEHICLE))
        repo.delete(super_admin, vehicle.id)
        assert repo.records == []
        assert repo.load() == []


class TestUnitOfWork:
    def test_writes_commit_together(self, db):
        access = SqlDataAccess(db, Vehicle)
        with unit_of_work(db):
            access.create(dict(VEHICLE))
            access.create(dict(VEHICLE, license_plate="DL3CAF0001"))
        db.rollback()
        assert len(access.fetch_all()) == 2

    def test_failure_rolls_back_every_write(self, db):
        access = SqlDataAccess(db, Vehicle)
        with pytest.raises(DataAccessError):
            with unit_of_work(db):
                access.create(dict(VEHICLE))
                raise DataAccessError("store down")
        assert access.fetch_all() == []
        assert "deferred_commit" not in db.info

    def test_nested_block_joins_outer(self, db):
        access = SqlDataAccess(db, Vehicle)
        with pytest.raises(DataAccessError):
            with unit_of_work(db):
                with unit_of_work(db):
                    access.create(dict(VEHICLE))
                raise DataAccessError("store down")
        assert access.fetch_all() == []


class TestUpdateSchemas:
    @pytest.mark.parametrize("schema", [VehicleUpdate, TrainerUpdate, PartsOrderUpdate, ServiceRecordUpdate])
    def test_explicit_null_location_rejected(self, schema):
        with pytest.raises(ValueError):
            schema.model_validate({"location": None})

    @pytest.mark.parametrize("schema", [VehicleUpdate, TrainerUpdate, PartsOrderUpdate, ServiceRecordUpdate])
    def test_omitted_location_left_alone(self, schema):
        assert schema.model_validate({}).model_dump(exclude_unset=True) == {}
