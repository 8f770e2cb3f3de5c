# fleet_portal/schemas/service_record.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Literal, Optional

from fleet_portal.services.location_service import require_concrete

_REG_NO = AliasChoices("vehicle_reg_no", "vehicleRegNo", "regNo", "licensePlate")
_LOCATION = AliasChoices("academy_location", "academyLocation", "location")


class ServiceRecordCreate(BaseModel):
    academy_location: str = Field(validation_alias=_LOCATION)
    brand: str
    model: str
    name: Optional[str] = None
    vehicle_reg_no: str = Field(validation_alias=_REG_NO)
    vin_no: Optional[str] = Field(None, validation_alias=AliasChoices("vin_no", "vinNo", "vin"))
    insurance_validity_date: Optional[datetime] = None
    insurance_status: Literal["Valid", "Expired"] = "Valid"
    puc_validity_date: Optional[datetime] = None
    puc_status: Literal["Valid", "Expired", "NA"] = "Valid"
    next_service_date: Optional[datetime] = None
    date_decommissioned: Optional[datetime] = None
    allocated_trainer: Optional[str] = None
    remarks: Optional[str] = None
    cost_incurred: Optional[float] = Field(None, ge=0)
    model_year: Optional[int] = None
    fuel: Optional[str] = None
    capacity: Optional[str] = None
    gearbox: Optional[str] = None

    @field_validator("academy_location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ServiceRecordUpdate(BaseModel):
    academy_location: Optional[str] = Field(None, validation_alias=_LOCATION)
    brand: Optional[str] = None
    model: Optional[str] = None
    name: Optional[str] = None
    vehicle_reg_no: Optional[str] = Field(None, validation_alias=_REG_NO)
    vin_no: Optional[str] = Field(None, validation_alias=AliasChoices("vin_no", "vinNo", "vin"))
    insurance_validity_date: Optional[datetime] = None
    insurance_status: Optional[Literal["Valid", "Expired"]] = None
    puc_validity_date: Optional[datetime] = None
    puc_status: Optional[Literal["Valid", "Expired", "NA"]] = None
    next_service_date: Optional[datetime] = None
    date_decommissioned: Optional[datetime] = None
    allocated_trainer: Optional[str] = None
    remarks: Optional[str] = None
    cost_incurred: Optional[float] = Field(None, ge=0)
    model_year: Optional[int] = None
    fuel: Optional[str] = None
    capacity: Optional[str] = None
    gearbox: Optional[str] = None

    @field_validator("academy_location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ServiceRecordOut(BaseModel):
    id: int
    academy_location: str
    brand: str
    model: str
    name: Optional[str]
    vehicle_reg_no: str
    vin_no: Optional[str]
    insurance_validity_date: Optional[datetime]
    insurance_status: Optional[str]
    puc_validity_date: Optional[datetime]
    puc_status: Optional[str]
    next_service_date: Optional[datetime]
    date_decommissioned: Optional[datetime]
    allocated_trainer: Optional[str]
    remarks: Optional[str]
    cost_incurred: Optional[float]
    model_year: Optional[int]
    fuel: Optional[str]
    capacity: Optional[str]
    gearbox: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
