# fleet_portal/schemas/user.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Literal, Optional

from fleet_portal.schemas.actor import Role
from fleet_portal.services.location_service import KNOWN_CODES, normalize


def _home_location(v: Optional[str]) -> Optional[str]:
    """Users may be pinned to a site or to ALL."""
    if v is None or v == "":
        return None
    code = normalize(v)
    if code not in KNOWN_CODES:
        raise ValueError(f"Unknown academy location '{v}'")
    return code


class UserCreate(BaseModel):
    # email is checked by user_service, not pydantic: malformed and duplicate
    # addresses both surface as ValidationError with no write
    name: str = Field(min_length=1)
    email: str
    role: Role
    location: Optional[str] = Field(None, validation_alias=AliasChoices("location", "homeLocation", "home_location"))
    department: Optional[str] = None
    employee_id: Optional[str] = None
    status: Literal["active", "inactive"] = "active"

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return _home_location(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None
    location: Optional[str] = Field(None, validation_alias=AliasChoices("location", "homeLocation", "home_location"))
    department: Optional[str] = None
    employee_id: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return _home_location(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    location: Optional[str]
    department: Optional[str]
    employee_id: Optional[str]
    status: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
