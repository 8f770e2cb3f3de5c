# fleet_portal/routers/users.py
"""User administration. Admins manage trainers and security staff at their site."""

from typing import Optional

from fastapi import APIRouter, Depends

from fleet_portal.routers.deps import get_actor, user_repo
from fleet_portal.schemas.actor import Actor
from fleet_portal.schemas.user import UserCreate, UserOut, UserUpdate
from fleet_portal.services import user_service
from fleet_portal.services.repository import Repository

router = APIRouter()


@router.get("/users", response_model=list[UserOut], summary="List users")
def list_users(role: Optional[str] = None, actor: Optional[Actor] = Depends(get_actor),
               users: Repository = Depends(user_repo)):
    result = users.visible(actor)
    if role:
        result = [u for u in result if u.role == role]
    return result


@router.get("/users/{user_id}", response_model=UserOut, summary="Get one user")
def get_user(user_id: int, actor: Optional[Actor] = Depends(get_actor),
             users: Repository = Depends(user_repo)):
    return users.find(actor, user_id)


@router.post("/users", response_model=UserOut, status_code=201, summary="Create a user")
async def create_user(body: UserCreate, actor: Optional[Actor] = Depends(get_actor),
                      users: Repository = Depends(user_repo)):
    return await user_service.create_user(users, actor, body)


@router.post("/admins", response_model=UserOut, status_code=201, summary="Create a location admin")
async def create_admin(body: UserCreate, actor: Optional[Actor] = Depends(get_actor),
                       users: Repository = Depends(user_repo)):
    return await user_service.create_admin(users, actor, body)


@router.patch("/users/{user_id}", response_model=UserOut, summary="Update a user")
async def update_user(user_id: int, body: UserUpdate, actor: Optional[Actor] = Depends(get_actor),
                      users: Repository = Depends(user_repo)):
    return await user_service.update_user(users, actor, user_id, body)


@router.delete("/users/{user_id}", summary="Remove a user")
async def delete_user(user_id: int, actor: Optional[Actor] = Depends(get_actor),
                      users: Repository = Depends(user_repo)):
    await user_service.delete_user(users, actor, user_id)
    return {"status": "removed", "id": user_id}
