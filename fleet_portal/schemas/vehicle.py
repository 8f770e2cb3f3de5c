# fleet_portal/schemas/vehicle.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Literal, Optional

from fleet_portal.services.location_service import require_concrete

VehicleStatus = Literal["Available", "Booked", "Maintenance", "Out of Service"]
FuelType = Literal["Petrol", "Diesel", "Electric", "Hybrid"]

# Registration number has been exported under all of these names.
_REG_NO = AliasChoices("license_plate", "licensePlate", "regNo", "vehicleRegNo", "vehicle_reg_no")
_LOCATION = AliasChoices("location", "academyLocation", "academy_location")


class VehicleCreate(BaseModel):
    brand: str
    model: str
    year: int
    license_plate: str = Field(validation_alias=_REG_NO)
    vin: str = Field("", validation_alias=AliasChoices("vin", "vinNo", "vin_no"))
    color: str = ""
    fuel_type: FuelType = "Petrol"
    status: VehicleStatus = "Available"
    mileage: int = Field(0, ge=0)
    location: str = Field(validation_alias=_LOCATION)
    last_service: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VehicleUpdate(BaseModel):
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    license_plate: Optional[str] = Field(None, validation_alias=_REG_NO)
    vin: Optional[str] = Field(None, validation_alias=AliasChoices("vin", "vinNo", "vin_no"))
    color: Optional[str] = None
    fuel_type: Optional[FuelType] = None
    status: Optional[VehicleStatus] = None
    mileage: Optional[int] = Field(None, ge=0)
    location: Optional[str] = Field(None, validation_alias=_LOCATION)
    last_service: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("location")
    @classmethod
    def check_location(cls, v):
        # explicit null is rejected; omitted fields never reach the validator
        return require_concrete(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VehicleOut(BaseModel):
    id: int
    brand: str
    model: str
    year: Optional[int]
    license_plate: str
    vin: Optional[str]
    color: Optional[str]
    fuel_type: Optional[str]
    status: str
    mileage: Optional[int]
    location: str
    last_service: Optional[datetime]
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
