# tests/conftest.py
"""Shared fixtures: an in-memory SQLite database and common actors."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fleet_portal.database import create_tables
from fleet_portal.models.booking import Booking
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.actor import Actor

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def super_admin():
    return Actor(role="super_admin", home_location="ALL", id="sa-1", name="Super Admin",
                 email="superadmin@academy.local")


@pytest.fixture
def pune_admin():
    return Actor(role="admin", home_location="PTC", id="admin-ptc", name="Pune Admin",
                 email="admin.pune@academy.local")


@pytest.fixture
def ncr_admin():
    return Actor(role="admin", home_location="NCR", id="admin-ncr", name="NCR Admin")


@pytest.fixture
def pune_security():
    return Actor(role="security", home_location="PTC", id="sec-ptc", name="Ravi Guard",
                 email="ravi@academy.local")


@pytest.fixture
def trainer():
    return Actor(role="trainer", id="T-7", name="Asha Kulkarni", email="asha@academy.local")


def add_vehicle(db, location="PTC", plate="MH12AB1234", status="Available", brand="Skoda", model="Octavia"):
    vehicle = Vehicle(brand=brand, model=model, year=2022, license_plate=plate, location=location,
                      status=status, created_at=NOW, updated_at=NOW)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def add_booking(db, vehicle, status="pending", trainer_id="T-7", trainer_name="Asha Kulkarni",
                start=None, end=None, location=None, purpose="Customer demo drive"):
    booking = Booking(
        vehicle_id=vehicle.id,
        trainer_id=trainer_id,
        trainer_name=trainer_name,
        start_date=start or NOW + timedelta(days=1),
        end_date=end or NOW + timedelta(days=2),
        purpose=purpose,
        status=status,
        urgency="normal",
        requested_location=location or vehicle.location,
        created_at=NOW,
        updated_at=NOW,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking
