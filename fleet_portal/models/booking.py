# fleet_portal/models/booking.py
"""
Vehicle bookings table.
Only the stored status lives here; overdue / ready-for-pickup are derived on read
by services/booking_state.py.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from fleet_portal.database import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, nullable=False, index=True)   # vehicles.id, no FK: logs outlive vehicles
    trainer_id = Column(String(50), nullable=False, index=True)
    trainer_name = Column(String(200), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    purpose = Column(String(300), nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    urgency = Column(String(10), default="normal", nullable=False)   # normal | high
    notes = Column(Text)
    requested_location = Column(String(20), index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    @property
    def booking_ref(self) -> str:
        return f"BK-{self.id:05d}" if self.id is not None else ""

    def __repr__(self):
        return f"<Booking {self.id} vehicle={self.vehicle_id} status={self.status}>"
