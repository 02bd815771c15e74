"""
Read-only projections for the dashboard: order and rider listings, metrics
"""

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from datetime import datetime, timezone
from typing import Optional
import math

from app.models.order import Order
from app.models.rider import Rider
from app.models.enums import (
    OrderStatus, RiderStatus, ACTIVE_ORDER_STATUSES, OPEN_ORDER_STATUSES
)
from app.services.data_access import SqlAlchemyStore

class OrderQueryService:
    """Filtered, paginated order listings"""

    def __init__(self, db: Session):
        self.db = db

    def list_orders(
        self,
        page: int = 1,
        page_size: int = 10,
        status: Optional[str] = None,
        rider_id: Optional[str] = None,
        store_id: Optional[str] = None,
        is_urgent: Optional[bool] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> dict:
        query = self.db.query(Order)

        if status:
            query = query.filter(Order.status == status)
        if rider_id:
            query = query.filter(Order.delivery_id == rider_id)
        if store_id:
            query = query.filter(Order.store_id == store_id)
        if is_urgent is not None:
            query = query.filter(Order.is_urgent.is_(is_urgent))
        if search:
            query = query.filter(Order.order_number.ilike(f"%{search}%"))
        if date_from:
            query = query.filter(Order.created_at >= date_from)
        if date_to:
            query = query.filter(Order.created_at <= date_to)

        total = query.count()

        offset = (page - 1) * page_size
        orders = (
            query.options(joinedload(Order.rider))
            .order_by(Order.created_at.desc(), Order.order_number.desc())
            .offset(offset)
            .limit(page_size)
            .all()
        )

        return {
            "orders": orders,
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size),
        }

    def get_order(self, order_id: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.rider))
            .filter(Order.id == order_id)
            .first()
        )

class RiderQueryService:
    """Rider listings with their current load"""

    def __init__(self, db: Session):
        self.db = db
        self.store = SqlAlchemyStore(db)

    def list_riders(
        self,
        status: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None
    ) -> list[tuple[Rider, int]]:
        query = self.db.query(Rider)
        if status:
            query = query.filter(Rider.status == status)
        if is_active is not None:
            query = query.filter(Rider.is_active.is_(is_active))
        if search:
            pattern = f"%{search}%"
            query = query.filter(Rider.full_name.ilike(pattern) | Rider.phone.ilike(pattern))

        riders = query.order_by(Rider.created_at.desc(), Rider.full_name).all()
        counts = self.store.active_order_counts([r.id for r in riders], ACTIVE_ORDER_STATUSES)
        return [(rider, counts.get(rider.id, 0)) for rider in riders]

class MetricsService:
    """Aggregates shown on the dashboard cards"""

    def __init__(self, db: Session):
        self.db = db

    def dashboard(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        active_orders = (
            self.db.query(func.count(Order.id))
            .filter(Order.status.in_(OPEN_ORDER_STATUSES))
            .scalar()
        )
        available_riders = (
            self.db.query(func.count(Rider.id))
            .filter(Rider.status == RiderStatus.AVAILABLE.value, Rider.is_active.is_(True))
            .scalar()
        )
        completed_today, today_revenue = (
            self.db.query(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0))
            .filter(
                Order.status == OrderStatus.DELIVERED.value,
                Order.delivered_at >= start_of_day
            )
            .one()
        )

        return {
            "active_orders": active_orders or 0,
            "available_riders": available_riders or 0,
            "today_revenue": float(today_revenue or 0),
            "completed_today": completed_today or 0,
        }
