# fleet_portal/routers/service_records.py
"""Vehicle service records: insurance, PUC and servicing history per academy."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import get_actor, service_record_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.service_record import ServiceRecordCreate, ServiceRecordOut, ServiceRecordUpdate
from fleet_portal.services.repository import Repository

router = APIRouter()


@router.get("/service-records", response_model=list[ServiceRecordOut], summary="List service records")
def list_service_records(insurance_status: Optional[str] = None, puc_status: Optional[str] = None,
                         actor: Optional[Actor] = Depends(get_actor),
                         records: Repository = Depends(service_record_repo)):
    result = records.visible(actor)
    if insurance_status:
        result = [r for r in result if r.insurance_status == insurance_status]
    if puc_status:
        result = [r for r in result if r.puc_status == puc_status]
    return result


@router.get("/service-records/{record_id}", response_model=ServiceRecordOut, summary="Get one service record")
def get_service_record(record_id: int, actor: Optional[Actor] = Depends(get_actor),
                       records: Repository = Depends(service_record_repo)):
    return records.find(actor, record_id)


@router.post("/service-records", response_model=ServiceRecordOut, status_code=201,
             summary="Add a service record")
def create_service_record(body: ServiceRecordCreate, actor: Optional[Actor] = Depends(get_actor),
                          records: Repository = Depends(service_record_repo)):
    return records.create(actor, body.model_dump())


@router.patch("/service-records/{record_id}", response_model=ServiceRecordOut,
              summary="Update a service record")
def update_service_record(record_id: int, body: ServiceRecordUpdate,
                          actor: Optional[Actor] = Depends(get_actor),
                          records: Repository = Depends(service_record_repo)):
    return records.update(actor, record_id, body.model_dump(exclude_unset=True))


@router.delete("/service-records/{record_id}", summary="Remove a service record")
def delete_service_record(record_id: int, actor: Optional[Actor] = Depends(get_actor),
                          records: Repository = Depends(service_record_repo)):
    records.delete(actor, record_id)
    return {"status": "removed", "id": record_id}
