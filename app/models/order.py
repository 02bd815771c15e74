"""
Order model for database operations
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text, Float, Boolean, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import OrderStatus

class Order(Base):
    """Customer delivery request"""
    __tablename__ = "orders"
    
    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(50), unique=True, index=True, nullable=False)
    status = Column(String(20), default=OrderStatus.PENDING.value, nullable=False, index=True)
    customer_name = Column(String(150), nullable=False)
    customer_phone = Column(String(30), nullable=False)
    customer_address = Column(Text, nullable=False)
    customer_location = Column(JSON, nullable=True)  # {"lat": ..., "lng": ...}
    store_id = Column(String(36), nullable=False, index=True)
    store_name = Column(String(150), nullable=False)
    delivery_id = Column(String(36), ForeignKey("riders.id"), nullable=True, index=True)
    total_amount = Column(Float, nullable=False, default=0)
    delivery_fee = Column(Float, nullable=False, default=0)
    is_urgent = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    picked_up_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    rider = relationship("Rider", back_populates="orders")
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        order_by="OrderStatusHistory.created_at",
    )
    
    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"
