# fleet_portal/models/vehicle.py
"""
Fleet vehicles table.
One row per training car; `location` always holds a concrete site code.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from fleet_portal.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand = Column(String(50), nullable=False)               # Skoda | Volkswagen | Audi
    model = Column(String(100), nullable=False)
    year = Column(Integer)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    vin = Column(String(50))
    color = Column(String(50))
    fuel_type = Column(String(20))                           # Petrol | Diesel | Electric | Hybrid
    status = Column(String(30), default="Available", nullable=False, index=True)
    mileage = Column(Integer, default=0)
    location = Column(String(20), nullable=False, index=True)
    last_service = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Vehicle {self.license_plate} {self.brand} {self.model} status={self.status}>"
