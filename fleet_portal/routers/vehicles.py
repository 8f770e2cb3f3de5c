# fleet_portal/routers/vehicles.py
"""Fleet vehicles: CRUD, scoped to the caller's academy location."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.exceptions import ValidationError
from fleet_portal.routers.deps import get_actor, vehicle_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from fleet_portal.services.location_service import normalize
from fleet_portal.services.repository import Repository

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles")
def list_vehicles(status: Optional[str] = None, location: Optional[str] = None,
                  actor: Optional[Actor] = Depends(get_actor),
                  vehicles: Repository = Depends(vehicle_repo)):
    result = vehicles.visible(actor)
    if status:
        result = [v for v in result if v.status == status]
    if location:
        code = normalize(location)
        result = [v for v in result if normalize(v.location) == code]
    return result


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one vehicle")
def get_vehicle(vehicle_id: int, actor: Optional[Actor] = Depends(get_actor),
                vehicles: Repository = Depends(vehicle_repo)):
    return vehicles.find(actor, vehicle_id)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Add a vehicle")
def create_vehicle(body: VehicleCreate, actor: Optional[Actor] = Depends(get_actor),
                   vehicles: Repository = Depends(vehicle_repo)):
    plate = body.license_plate.strip().upper()
    if any((v.license_plate or "").upper() == plate for v in vehicles.records):
        raise ValidationError(f"Plate {body.license_plate} already registered", field="license_plate")
    return vehicles.create(actor, body.model_dump())


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle")
def update_vehicle(vehicle_id: int, body: VehicleUpdate, actor: Optional[Actor] = Depends(get_actor),
                   vehicles: Repository = Depends(vehicle_repo)):
    return vehicles.update(actor, vehicle_id, body.model_dump(exclude_unset=True))


@router.delete("/vehicles/{vehicle_id}", summary="Remove a vehicle")
def delete_vehicle(vehicle_id: int, actor: Optional[Actor] = Depends(get_actor),
                   vehicles: Repository = Depends(vehicle_repo)):
    vehicles.delete(actor, vehicle_id)
    return {"status": "removed", "id": vehicle_id}
