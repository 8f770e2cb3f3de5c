# fleet_portal/routers/search.py
"""Global search box across vehicles, bookings, users and service records."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import booking_repo, get_actor, service_record_repo, user_repo, vehicle_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.search import SearchResponse
from fleet_portal.services.repository import Repository
from fleet_portal.services.search_service import search

router = APIRouter()


@router.get("/search", response_model=SearchResponse, summary="Search everything the caller can see")
def global_search(q: str = "", actor: Optional[Actor] = Depends(get_actor),
                  vehicles: Repository = Depends(vehicle_repo),
                  bookings: Repository = Depends(booking_repo),
                  users: Repository = Depends(user_repo),
                  service_records: Repository = Depends(service_record_repo)):
    return search(
        actor, q,
        vehicles=vehicles.records,
        bookings=bookings.records,
        users=users.records,
        service_records=service_records.records,
    )
