# fleet_portal/models/message.py
"""
In-app messages between staff.

An empty recipient_ids list means a broadcast. recipient_roles widens delivery
to everyone holding one of the roles. location pins the message to one site;
readers outside that site never see it. Read state is per reader (read_by).
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from fleet_portal.database import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String(50), nullable=False, index=True)
    sender_name = Column(String(200), nullable=False)
    sender_role = Column(String(20), nullable=False)
    recipient_ids = Column(JSON, nullable=False, default=list)     # [] = everyone
    recipient_roles = Column(JSON, nullable=False, default=list)
    location = Column(String(20), index=True)                      # site code or NULL (no restriction)
    content = Column(Text, nullable=False)
    parent_message_id = Column(Integer, index=True)                # set on replies
    read_by = Column(JSON, nullable=False, default=list)           # reader ids
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Message {self.id} from={self.sender_id} parent={self.parent_message_id}>"
