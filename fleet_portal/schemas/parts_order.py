# fleet_portal/schemas/parts_order.py
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Literal, Optional

from fleet_portal.services.location_service import require_concrete

OrderType = Literal["Technical", "Body"]
OrderStatus = Literal["Ordered", "Received", "Installed", "Cancelled"]


class PartsOrderCreate(BaseModel):
    order_type: OrderType
    order_date: datetime
    location: str
    vehicle_id: Optional[int] = None
    part_name: str = Field(min_length=1)
    quantity: int = Field(1, ge=1)
    part_cost: float = Field(ge=0)
    total_cost: Optional[float] = Field(None, ge=0)
    status: OrderStatus = "Ordered"

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)

    @model_validator(mode="after")
    def fill_total(self):
        if self.total_cost is None:
            self.total_cost = round(self.quantity * self.part_cost, 2)
        return self

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PartsOrderUpdate(BaseModel):
    order_type: Optional[OrderType] = None
    order_date: Optional[datetime] = None
    location: Optional[str] = None
    vehicle_id: Optional[int] = None
    part_name: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    part_cost: Optional[float] = Field(None, ge=0)
    total_cost: Optional[float] = Field(None, ge=0)
    status: Optional[OrderStatus] = None

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PartsOrderOut(BaseModel):
    id: int
    order_type: str
    order_date: datetime
    location: str
    vehicle_id: Optional[int]
    part_name: str
    quantity: int
    part_cost: float
    total_cost: float
    status: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
