"""
Pydantic schemas for Rider operations
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.schemas.order import Coordinates

class RiderResponse(BaseModel):
    """Schema for rider responses"""
    id: str
    full_name: str
    phone: str
    email: Optional[str] = None
    status: str
    is_active: bool
    current_location: Optional[Coordinates] = None
    last_location_update: Optional[datetime] = None
    vehicle_type: str
    vehicle_plate: Optional[str] = None
    avatar_url: Optional[str] = None
    rating: Optional[float] = None
    total_deliveries: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class RiderWithLoadResponse(RiderResponse):
    """Rider plus its assigned and in-transit order count"""
    active_orders: int = 0

class RiderListResponse(BaseModel):
    riders: list[RiderWithLoadResponse]
    count: int

class RiderActiveUpdate(BaseModel):
    is_active: bool = Field(..., description="Whether the rider may receive orders")
