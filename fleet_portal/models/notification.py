# fleet_portal/models/notification.py
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON
from fleet_portal.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(50), nullable=False, index=True)   # recipient actor id
    type = Column(String(40), nullable=False, index=True)      # booking_created | key_issued | ...
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(String(20), default="info", nullable=False)
    related_entity_type = Column(String(30))                   # booking | vehicle | damage_report | parts_request
    related_entity_id = Column(String(50), index=True)
    action_url = Column(String(200))
    extra = Column(JSON)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Notification {self.id} to={self.user_id} type={self.type} read={self.read}>"
