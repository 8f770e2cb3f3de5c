# fleet_portal/schemas/trainer.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from fleet_portal.services.location_service import require_concrete


class TrainerCreate(BaseModel):
    name: str = Field(min_length=1)
    location: str
    specializations: list[str] = []

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)


class TrainerUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    specializations: Optional[list[str]] = None

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)


class TrainerOut(BaseModel):
    id: int
    name: str
    location: str
    specializations: list[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
