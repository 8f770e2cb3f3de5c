# fleet_portal/schemas/dashboard.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class DashboardStats(BaseModel):
    generated_at: datetime
    role: str
    location: Optional[str]
    locations: list[str]
    total_vehicles: int
    vehicles_by_status: dict[str, int]
    total_bookings: int
    bookings_by_status: dict[str, int]
    pending_approvals: int
    ready_for_pickup: int
    in_use: int
    overdue: int
    overdue_booking_ids: list[int]
