"""
Audit trail of order status changes made through the workflow
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
from typing import Optional
import logging

from app.models.status_history import OrderStatusHistory

logger = logging.getLogger(__name__)

class StatusHistoryRecorder:
    """Writes order_status_history rows without ever failing the caller"""
    
    def __init__(self, db: Session):
        self.db = db
    
    async def record(
        self,
        order_id: str,
        status: str,
        notes: Optional[str] = None,
        changed_by: Optional[str] = None
    ) -> Optional[OrderStatusHistory]:
        """Record a transition; returns None if it could not be stored"""
        try:
            entry = OrderStatusHistory(
                order_id=order_id,
                status=getattr(status, "value", status),
                notes=notes,
                changed_by=changed_by,
                created_at=datetime.now(timezone.utc)
            )
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
            return entry
            
        except SQLAlchemyError as e:
            logger.error(f"Failed to record status '{status}' for order {order_id}: {e}")
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after history failure also failed: {rollback_error}")
            return None
    
    def for_order(self, order_id: str) -> list[OrderStatusHistory]:
        """History of one order, oldest first"""
        return (
            self.db.query(OrderStatusHistory)
            .filter(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.created_at.asc())
            .all()
        )
