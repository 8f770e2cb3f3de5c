# fleet_portal/models/service_record.py
"""
Vehicle service / compliance records (insurance, PUC, decommissioning).
Scoped by `academy_location`, which may differ from the vehicle's current site.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from fleet_portal.database import Base


class ServiceRecord(Base):
    __tablename__ = "service_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    academy_location = Column(String(20), nullable=False, index=True)
    brand = Column(String(50), nullable=False)
    model = Column(String(100), nullable=False)
    name = Column(String(200))                        # full variant name
    vehicle_reg_no = Column(String(50), nullable=False, index=True)
    vin_no = Column(String(50))
    insurance_validity_date = Column(DateTime(timezone=True))
    insurance_status = Column(String(20), default="Valid")   # Valid | Expired
    puc_validity_date = Column(DateTime(timezone=True))
    puc_status = Column(String(20), default="Valid")         # Valid | Expired | NA
    next_service_date = Column(DateTime(timezone=True))
    date_decommissioned = Column(DateTime(timezone=True))
    allocated_trainer = Column(String(200))
    remarks = Column(Text)
    cost_incurred = Column(Float)
    model_year = Column(Integer)
    fuel = Column(String(20))
    capacity = Column(String(20))
    gearbox = Column(String(50))
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ServiceRecord {self.id} reg={self.vehicle_reg_no} location={self.academy_location}>"
