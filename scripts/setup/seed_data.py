# scripts/setup/seed_data.py
"""
Load demo vehicles, trainers, users and bookings for local development.
Skips any table that already has rows unless --force is given.
Usage: python scripts/setup/seed_data.py [--force]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import timedelta

from fleet_portal.database import SessionLocal, create_tables
from fleet_portal.models.booking import Booking
from fleet_portal.models.trainer import Trainer
from fleet_portal.models.user import User
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.actor import Actor
from fleet_portal.services.repository import repository_for
from fleet_portal.utils.time_utils import utcnow

SEEDER = Actor(role="super_admin", id="seed", name="Seed Script")

VEHICLES = [
    {"brand": "Skoda", "model": "Octavia", "year": 2022, "license_plate": "MH12AB1234",
     "fuel_type": "Petrol", "location": "PTC", "color": "White", "mileage": 18200},
    {"brand": "Volkswagen", "model": "Virtus", "year": 2023, "license_plate": "MH12CD5678",
     "fuel_type": "Petrol", "location": "PTC", "color": "Red", "mileage": 6400},
    {"brand": "Audi", "model": "Q5", "year": 2021, "license_plate": "DL3CAF0001",
     "fuel_type": "Diesel", "location": "NCR", "color": "Black", "mileage": 32100},
    {"brand": "Skoda", "model": "Kushaq", "year": 2022, "license_plate": "KA01MN4321",
     "fuel_type": "Petrol", "location": "BLR", "color": "Grey", "mileage": 12050},
    {"brand": "Volkswagen", "model": "Taigun", "year": 2023, "license_plate": "MH14VG7777",
     "fuel_type": "Petrol", "location": "VGTAP", "color": "Blue", "mileage": 3100,
     "status": "Maintenance"},
]

TRAINERS = [
    {"name": "Asha Kulkarni", "location": "PTC", "specializations": ["Diagnostics", "EV"]},
    {"name": "Rohit Mehra", "location": "NCR", "specializations": ["Body Repair"]},
    {"name": "Kavya Rao", "location": "BLR", "specializations": ["Sales Training"]},
]

USERS = [
    {"name": "Super Admin", "email": "superadmin@academy.local", "role": "super_admin", "location": "ALL"},
    {"name": "Pune Admin", "email": "admin.pune@academy.local", "role": "admin", "location": "PTC"},
    {"name": "NCR Admin", "email": "admin.ncr@academy.local", "role": "admin", "location": "NCR"},
    {"name": "Pune Security", "email": "security.pune@academy.local", "role": "security", "location": "PTC"},
    {"name": "Asha Kulkarni", "email": "asha.kulkarni@academy.local", "role": "trainer", "location": "PTC"},
]


def seed(db, model, rows, force: bool) -> list:
    repo = repository_for(db, model)
    existing = repo.load()
    if existing and not force:
        print(f"   - {repo.name}: {len(existing)} rows present, skipped")
        return existing
    created = [repo.create(SEEDER, row) for row in rows]
    print(f"   + {repo.name}: {len(created)} rows")
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed the fleet portal with demo data")
    parser.add_argument("--force", action="store_true", help="Insert even when tables already have rows")
    args = parser.parse_args()

    create_tables()
    db = SessionLocal()
    try:
        print("Seeding demo data...")
        vehicles = seed(db, Vehicle, VEHICLES, args.force)
        trainers = seed(db, Trainer, TRAINERS, args.force)
        seed(db, User, USERS, args.force)

        now = utcnow()
        pune_car, ncr_car = vehicles[0], vehicles[2]
        bookings = [
            {"vehicle_id": pune_car.id, "trainer_id": str(trainers[0].id), "trainer_name": trainers[0].name,
             "start_date": now + timedelta(days=1), "end_date": now + timedelta(days=2),
             "purpose": "Customer demo drive", "status": "pending", "requested_location": "PTC"},
            {"vehicle_id": ncr_car.id, "trainer_id": str(trainers[1].id), "trainer_name": trainers[1].name,
             "start_date": now - timedelta(days=3), "end_date": now - timedelta(days=1),
             "purpose": "Body repair workshop", "status": "active", "requested_location": "NCR"},
        ]
        seed(db, Booking, bookings, args.force)
        print("Done.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
