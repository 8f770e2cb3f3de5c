# fleet_portal/models/user.py
"""
Portal users: admins, trainers, security officers and super admins.
Email uniqueness is enforced case-insensitively by services/user_service.py.
"""

from sqlalchemy import Column, Integer, String, DateTime
from fleet_portal.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    role = Column(String(20), nullable=False, index=True)   # super_admin | admin | trainer | security
    location = Column(String(20))                           # site code, ALL, or NULL
    department = Column(String(100))
    employee_id = Column(String(50))
    status = Column(String(20), default="active", nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<User {self.email} role={self.role} location={self.location}>"
