# fleet_portal/routers/deps.py
"""
Shared router dependencies.
The acting user arrives as request headers set by the upstream auth layer;
a missing role means no actor, which every policy check denies.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from fleet_portal.database import get_db
from fleet_portal.models.booking import Booking
from fleet_portal.models.parts_order import PartsOrder
from fleet_portal.models.service_record import ServiceRecord
from fleet_portal.models.trainer import Trainer
from fleet_portal.models.user import User
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.actor import Actor
from fleet_portal.services.repository import Repository, repository_for


def get_actor(
    x_actor_role: Optional[str] = Header(None),
    x_actor_location: Optional[str] = Header(None),
    x_actor_id: Optional[str] = Header(None),
    x_actor_name: Optional[str] = Header(None),
    x_actor_email: Optional[str] = Header(None),
) -> Optional[Actor]:
    role = (x_actor_role or "").strip()
    if not role:
        return None
    return Actor(
        role=role,
        home_location=x_actor_location or None,
        id=x_actor_id,
        name=x_actor_name,
        email=x_actor_email,
    )


def _loaded(db: Session, model) -> Repository:
    repo = repository_for(db, model)
    repo.load()
    return repo


def vehicle_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, Vehicle)


def booking_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, Booking)


def user_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, User)


def trainer_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, Trainer)


def service_record_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, ServiceRecord)


def parts_order_repo(db: Session = Depends(get_db)) -> Repository:
    return _loaded(db, PartsOrder)
