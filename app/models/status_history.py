"""
Order status history model for auditing workflow transitions
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class OrderStatusHistory(Base):
    """One row per status an order entered through this service"""
    __tablename__ = "order_status_history"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    changed_by = Column(String(36), nullable=True)  # profile id of the caller
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="status_history")

    def __repr__(self):
        return f"<OrderStatusHistory(id={self.id}, order_id='{self.order_id}', status='{self.status}')>"
