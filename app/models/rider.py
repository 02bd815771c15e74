"""
Rider (delivery courier) model
"""

import uuid

from sqlalchemy import Column, String, DateTime, Float, Integer, Boolean, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import RiderStatus, VehicleType

class Rider(Base):
    """Delivery courier with availability state and location"""
    __tablename__ = "riders"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(150), nullable=False, index=True)
    phone = Column(String(30), nullable=False)
    email = Column(String(150), nullable=True)
    status = Column(String(20), default=RiderStatus.AVAILABLE.value, nullable=False, index=True)
    # Independent of status: an inactive rider is never assignable
    is_active = Column(Boolean, default=True, nullable=False)
    current_location = Column(JSON, nullable=True)  # {"lat": ..., "lng": ...}
    last_location_update = Column(DateTime(timezone=True), nullable=True)
    vehicle_type = Column(String(20), default=VehicleType.MOTORCYCLE.value, nullable=False)
    vehicle_plate = Column(String(20), nullable=True)
    avatar_url = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True)
    total_deliveries = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    orders = relationship("Order", back_populates="rider")

    def __repr__(self):
        return f"<Rider(id={self.id}, full_name='{self.full_name}', status='{self.status}', is_active={self.is_active})>"
