"""
Closed value sets shared by models, schemas and services
"""

from enum import Enum

class OrderStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class RiderStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"

class VehicleType(str, Enum):
    BIKE = "bike"
    MOTORCYCLE = "motorcycle"
    CAR = "car"

# Orders that keep a rider occupied
ACTIVE_ORDER_STATUSES = (OrderStatus.ASSIGNED.value, OrderStatus.IN_TRANSIT.value)

# Orders shown as "active" on the dashboard
OPEN_ORDER_STATUSES = (
    OrderStatus.PENDING.value,
    OrderStatus.ASSIGNED.value,
    OrderStatus.IN_TRANSIT.value,
)
