# fleet_portal/schemas/security_log.py
"""
Security log snapshots. Every nested model is frozen: an entry is a record of
what the booking, vehicle and people looked like at the moment of the event.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional

LogType = Literal["Key Issued", "Vehicle Returned", "Damage Reported", "Parts Requested"]
LOG_TYPES = ("Key Issued", "Vehicle Returned", "Damage Reported", "Parts Requested")

RangeLabel = Literal["All_Time", "Last_Week", "Last_Month", "Last_3_Months", "Last_6_Months", "Last_Year"]


class OfficerSnapshot(BaseModel):
    id: str
    name: str
    email: str = ""

    class Config:
        frozen = True


class TrainerSnapshot(BaseModel):
    id: str
    name: str

    class Config:
        frozen = True


class VehicleSnapshot(BaseModel):
    id: str
    brand: str = ""
    model: str = ""
    reg_no: str = ""

    class Config:
        frozen = True


class BookingSnapshot(BaseModel):
    id: str
    booking_ref: str
    purpose: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    expected_return_date: Optional[str] = None
    actual_return_date: Optional[str] = None
    location: str = "Unknown"

    class Config:
        frozen = True


class SecurityLogCreate(BaseModel):
    type: LogType
    security_officer: OfficerSnapshot
    trainer: TrainerSnapshot
    vehicle: VehicleSnapshot
    booking: BookingSnapshot
    notes: Optional[str] = None
    damage_report: Optional[str] = None
    parts_request: Optional[str] = None


class SecurityLogOut(BaseModel):
    id: str
    type: str
    timestamp: datetime
    security_officer: OfficerSnapshot
    trainer: TrainerSnapshot
    vehicle: VehicleSnapshot
    booking: BookingSnapshot
    notes: Optional[str] = None
    damage_report: Optional[str] = None
    parts_request: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class SecurityLogFilter(BaseModel):
    types: Optional[list[LogType]] = None
    start: Optional[datetime] = None        # explicit range, inclusive
    end: Optional[datetime] = None
    range_label: Optional[RangeLabel] = None  # relative range, used when start is not given
    location: Optional[str] = None          # narrows within the actor's scope, never widens it
    free_text: Optional[str] = None
