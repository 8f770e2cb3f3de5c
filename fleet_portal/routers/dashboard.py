# fleet_portal/routers/dashboard.py
"""Dashboard summary counts for the caller's location."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import booking_repo, get_actor, vehicle_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.dashboard import DashboardStats
from fleet_portal.services.dashboard_service import build_dashboard
from fleet_portal.services.repository import Repository
from fleet_portal.utils.time_utils import utcnow

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats, summary="Fleet and booking summary")
def get_dashboard(actor: Optional[Actor] = Depends(get_actor),
                  vehicles: Repository = Depends(vehicle_repo),
                  bookings: Repository = Depends(booking_repo)):
    return build_dashboard(actor, vehicles.records, bookings.records, utcnow())
