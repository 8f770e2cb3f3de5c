# fleet_portal/models/security_log.py
"""
Security audit log table: key issues, vehicle returns, damage and parts reports.
Append-only. Officer, trainer, vehicle and booking are stored as JSON snapshots
taken at append time, so rows stay intact after the booking or vehicle changes
or is deleted.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text, JSON
from fleet_portal.database import Base


class SecurityLog(Base):
    __tablename__ = "security_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(String(30), nullable=False, index=True)   # Key Issued | Vehicle Returned | Damage Reported | Parts Requested
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    security_officer = Column(JSON, nullable=False)         # {id, name, email}
    trainer = Column(JSON, nullable=False)                  # {id, name}
    vehicle = Column(JSON, nullable=False)                  # {id, brand, model, reg_no}
    booking = Column(JSON, nullable=False)                  # {id, booking_ref, purpose, ..., location}
    notes = Column(Text)
    damage_report = Column(Text)
    parts_request = Column(Text)

    def __repr__(self):
        return f"<SecurityLog {self.id} type={self.type} at={self.timestamp}>"
