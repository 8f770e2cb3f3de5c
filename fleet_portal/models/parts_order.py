# fleet_portal/models/parts_order.py
from sqlalchemy import Column, Integer, String, DateTime, Float
from fleet_portal.database import Base


class PartsOrder(Base):
    __tablename__ = "parts_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_type = Column(String(20), nullable=False)       # Technical | Body
    order_date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(20), nullable=False, index=True)
    vehicle_id = Column(Integer)                          # optional: stock orders have no vehicle
    part_name = Column(String(200), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    part_cost = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    status = Column(String(20), default="Ordered", nullable=False)   # Ordered | Received | Installed | Cancelled
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<PartsOrder {self.id} part={self.part_name} status={self.status}>"
