# fleet_portal/models/trainer.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from fleet_portal.database import Base


class Trainer(Base):
    __tablename__ = "trainers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    location = Column(String(20), nullable=False, index=True)
    specializations = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Trainer {self.name} location={self.location}>"
