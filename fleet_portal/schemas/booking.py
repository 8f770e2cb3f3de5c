# fleet_portal/schemas/booking.py
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Any, Literal, Optional

from fleet_portal.services import booking_state
from fleet_portal.services.location_service import require_concrete

BookingStatus = Literal["pending", "approved", "rejected", "active", "completed", "cancelled"]
Urgency = Literal["normal", "high"]


class BookingCreate(BaseModel):
    vehicle_id: int
    trainer_id: Optional[str] = None       # defaults to the requesting trainer
    trainer_name: Optional[str] = None
    start_date: datetime
    end_date: datetime
    purpose: str = Field(min_length=1)
    urgency: Urgency = "normal"
    notes: Optional[str] = None
    requested_location: Optional[str] = Field(
        None, validation_alias=AliasChoices("requested_location", "requestedLocation", "location")
    )

    @field_validator("requested_location")
    @classmethod
    def check_location(cls, v):
        return require_concrete(v) if v is not None else v

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    notes: Optional[str] = None


class KeyIssueRequest(BaseModel):
    notes: Optional[str] = None


class VehicleReturnRequest(BaseModel):
    condition: Literal["good", "damaged"] = "good"
    notes: Optional[str] = None


class IncidentReport(BaseModel):
    """Body for damage reports and parts requests raised against a booking."""
    description: str = Field(min_length=1)


class BookingOut(BaseModel):
    id: int
    booking_ref: str
    vehicle_id: int
    trainer_id: str
    trainer_name: str
    start_date: datetime
    end_date: datetime
    purpose: str
    status: str
    urgency: str
    notes: Optional[str]
    requested_location: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    # Derived on read, never stored
    is_overdue: bool = False
    is_ready_for_pickup: bool = False
    is_in_use: bool = False
    display_status: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_booking(cls, booking: Any, now: datetime) -> "BookingOut":
        facets = booking_state.derive_facets(booking, now)
        return cls.model_validate(booking).model_copy(update={
            "is_overdue": facets.is_overdue,
            "is_ready_for_pickup": facets.is_ready_for_pickup,
            "is_in_use": facets.is_in_use,
            "display_status": booking_state.display_status(booking, now),
        })
