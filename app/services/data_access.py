"""
Data access for orders and riders
Every read goes back to the database; every write commits on its own.
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
from typing import Optional, Iterable, Dict, List
import logging

from app.models.order import Order
from app.models.rider import Rider
from app.models.enums import RiderStatus
from app.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

class SqlAlchemyStore:
    """Row-level reads and writes used by the assignment workflow"""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, error: SQLAlchemyError) -> DatabaseError:
        try:
            self.db.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f"Rollback after failed {action} also failed: {rollback_error}")
        logger.error(f"Database error during {action}: {error}")
        return DatabaseError(f"Failed to {action}: {str(error)}", error)

    def get_rider(self, rider_id: str) -> Optional[Rider]:
        try:
            return (
                self.db.query(Rider)
                .filter(Rider.id == rider_id)
                .populate_existing()
                .first()
            )
        except SQLAlchemyError as e:
            raise self._fail(f"read rider {rider_id}", e)

    def get_order(self, order_id: str) -> Optional[Order]:
        try:
            return (
                self.db.query(Order)
                .filter(Order.id == order_id)
                .populate_existing()
                .first()
            )
        except SQLAlchemyError as e:
            raise self._fail(f"read order {order_id}", e)

    def update_order(
        self,
        order_id: str,
        fields: dict,
        expected_statuses: Optional[Iterable[str]] = None
    ) -> int:
        """
        Update an order and return the number of rows changed.

        With expected_statuses the update only applies while the order is
        still in one of them, so concurrent callers cannot both win.
        """
        try:
            query = self.db.query(Order).filter(Order.id == order_id)
            if expected_statuses is not None:
                query = query.filter(Order.status.in_([_value(s) for s in expected_statuses]))
            updated = query.update(_values(fields), synchronize_session=False)
            self.db.commit()
            return updated
        except SQLAlchemyError as e:
            raise self._fail(f"update order {order_id}", e)

    def update_rider(self, rider_id: str, fields: dict) -> int:
        try:
            updated = (
                self.db.query(Rider)
                .filter(Rider.id == rider_id)
                .update(_values(fields), synchronize_session=False)
            )
            self.db.commit()
            return updated
        except SQLAlchemyError as e:
            raise self._fail(f"update rider {rider_id}", e)

    def count_orders(
        self,
        delivery_id: str,
        status_in: Iterable[str],
        exclude_order_id: Optional[str] = None
    ) -> int:
        try:
            query = self.db.query(func.count(Order.id)).filter(
                Order.delivery_id == delivery_id,
                Order.status.in_([_value(s) for s in status_in])
            )
            if exclude_order_id is not None:
                query = query.filter(Order.id != exclude_order_id)
            return query.scalar() or 0
        except SQLAlchemyError as e:
            raise self._fail(f"count orders of rider {delivery_id}", e)

    def list_available_riders(self) -> List[Rider]:
        try:
            return (
                self.db.query(Rider)
                .filter(
                    Rider.status == RiderStatus.AVAILABLE.value,
                    Rider.is_active.is_(True)
                )
                .order_by(Rider.full_name)
                .populate_existing()
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("list available riders", e)

    def active_order_counts(self, rider_ids: Iterable[str], status_in: Iterable[str]) -> Dict[str, int]:
        """Count orders per rider in one query; riders without orders map to 0"""
        rider_ids = list(rider_ids)
        if not rider_ids:
            return {}
        try:
            rows = (
                self.db.query(Order.delivery_id, func.count(Order.id))
                .filter(
                    Order.delivery_id.in_(rider_ids),
                    Order.status.in_([_value(s) for s in status_in])
                )
                .group_by(Order.delivery_id)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("count active orders per rider", e)

        counts = {rider_id: 0 for rider_id in rider_ids}
        counts.update({rider_id: count for rider_id, count in rows})
        return counts

def _value(value):
    return getattr(value, "value", value)

def _values(fields: dict) -> dict:
    return {key: _value(value) for key, value in fields.items()}
