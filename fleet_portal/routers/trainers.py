# fleet_portal/routers/trainers.py
"""Trainer directory."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import get_actor, trainer_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.trainer import TrainerCreate, TrainerOut, TrainerUpdate
from fleet_portal.services.repository import Repository

router = APIRouter()


@router.get("/trainers", response_model=list[TrainerOut], summary="List trainers")
def list_trainers(actor: Optional[Actor] = Depends(get_actor),
                  trainers: Repository = Depends(trainer_repo)):
    return trainers.visible(actor)


@router.post("/trainers", response_model=TrainerOut, status_code=201, summary="Add a trainer")
def create_trainer(body: TrainerCreate, actor: Optional[Actor] = Depends(get_actor),
                   trainers: Repository = Depends(trainer_repo)):
    return trainers.create(actor, body.model_dump())


@router.patch("/trainers/{trainer_id}", response_model=TrainerOut, summary="Update a trainer")
def update_trainer(trainer_id: int, body: TrainerUpdate, actor: Optional[Actor] = Depends(get_actor),
                   trainers: Repository = Depends(trainer_repo)):
    return trainers.update(actor, trainer_id, body.model_dump(exclude_unset=True))


@router.delete("/trainers/{trainer_id}", summary="Remove a trainer")
def delete_trainer(trainer_id: int, actor: Optional[Actor] = Depends(get_actor),
                   trainers: Repository = Depends(trainer_repo)):
    trainers.delete(actor, trainer_id)
    return {"status": "removed", "id": trainer_id}
