"""
Pydantic schemas for Order operations
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

class Coordinates(BaseModel):
    """Geographic point"""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

class RiderSummary(BaseModel):
    """Rider fields embedded in order responses"""
    id: str
    full_name: str
    phone: str
    status: str

    model_config = ConfigDict(from_attributes=True)

class OrderResponse(BaseModel):
    """Schema for order responses"""
    id: str
    order_number: str
    status: str
    customer_name: str
    customer_phone: str
    customer_address: str
    customer_location: Optional[Coordinates] = None
    store_id: str
    store_name: str
    delivery_id: Optional[str] = None
    total_amount: float
    delivery_fee: float
    is_urgent: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_at: Optional[datetime] = None
    picked_up_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    rider: Optional[RiderSummary] = None

    model_config = ConfigDict(from_attributes=True)

class OrderListResponse(BaseModel):
    """Schema for paginated order list responses"""
    orders: list[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

class OrderStatusHistoryResponse(BaseModel):
    """One recorded status change"""
    id: str
    order_id: str
    status: str
    notes: Optional[str] = None
    changed_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AssignRiderRequest(BaseModel):
    """Body of the assign endpoint"""
    rider_id: str = Field(..., min_length=1, description="Rider to assign the order to")

class CancelOrderRequest(BaseModel):
    """Body of the cancel endpoint"""
    reason: Optional[str] = Field(None, max_length=500, description="Why the order is cancelled")

    @field_validator('reason')
    @classmethod
    def blank_reason_is_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

class AssignmentResultResponse(BaseModel):
    """Outcome of assign and cancel"""
    success: bool
    error: Optional[str] = None
    code: Optional[str] = None
