# fleet_portal/schemas/actor.py
from pydantic import BaseModel
from typing import Literal, Optional

Role = Literal["super_admin", "admin", "trainer", "security"]


class Actor(BaseModel):
    """Who is making the request. Authentication happens upstream."""

    role: str
    home_location: Optional[str] = None    # LocationCode, "ALL", or None
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    class Config:
        frozen = True
