"""
Order assignment workflow
Assigning orders to riders and cancelling them.

Expected failures (missing rows, wrong state, database trouble) come back as
an unsuccessful AssignmentResult instead of an exception. Rider status is a
secondary write: if it fails after the order changed, the order change
stands and the failure is only logged.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional
import logging

from app.models.enums import OrderStatus, RiderStatus, OPEN_ORDER_STATUSES
from app.services.availability import RiderAvailabilityTracker
from app.services.data_access import SqlAlchemyStore
from app.services.status_history import StatusHistoryRecorder
from app.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

CANCEL_NOTE_PREFIX = "Cancelado"
DEFAULT_CANCEL_NOTE = "Cancelado por el administrador"

# Orders that can still be cancelled
CANCELLABLE_STATUSES = OPEN_ORDER_STATUSES

class AssignmentError:
    """Error codes and the messages shown to staff"""
    RIDER_NOT_FOUND = "RIDER_NOT_FOUND"
    RIDER_INACTIVE = "RIDER_INACTIVE"
    RIDER_UNAVAILABLE = "RIDER_UNAVAILABLE"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_NOT_PENDING = "ORDER_NOT_PENDING"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    ALREADY_DELIVERED = "ALREADY_DELIVERED"
    ORDER_UPDATE_FAILED = "ORDER_UPDATE_FAILED"
    CANCEL_FAILED = "CANCEL_FAILED"
    ASSIGN_UNEXPECTED = "ASSIGN_UNEXPECTED"
    CANCEL_UNEXPECTED = "CANCEL_UNEXPECTED"

    MESSAGES = {
        RIDER_NOT_FOUND: "Rider no encontrado",
        RIDER_INACTIVE: "Rider no está activo",
        RIDER_UNAVAILABLE: "Rider no está disponible",
        ORDER_NOT_FOUND: "Pedido no encontrado",
        ORDER_NOT_PENDING: "Pedido ya fue asignado o completado",
        ALREADY_CANCELLED: "Pedido ya está cancelado",
        ALREADY_DELIVERED: "No se puede cancelar un pedido entregado",
        ORDER_UPDATE_FAILED: "Error al actualizar el pedido",
        CANCEL_FAILED: "Error al cancelar el pedido",
        ASSIGN_UNEXPECTED: "Error inesperado al asignar rider",
        CANCEL_UNEXPECTED: "Error inesperado al cancelar pedido",
    }

@dataclass
class AssignmentResult:
    success: bool
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def ok(cls) -> "AssignmentResult":
        return cls(success=True)

    @classmethod
    def fail(cls, code: str) -> "AssignmentResult":
        return cls(success=False, error=AssignmentError.MESSAGES[code], code=code)

    def to_dict(self) -> dict:
        return asdict(self)

def cancellation_note(reason: Optional[str], existing_notes: Optional[str] = None) -> str:
    """Notes after cancelling: the marker is appended to whatever was there"""
    reason = (reason or "").strip()
    marker = f"{CANCEL_NOTE_PREFIX}: {reason}" if reason else DEFAULT_CANCEL_NOTE
    if existing_notes and existing_notes.strip():
        return f"{existing_notes.rstrip()}\n{marker}"
    return marker

class OrderAssignmentWorkflow:
    """State transitions pending -> assigned and * -> cancelled"""

    def __init__(
        self,
        store: SqlAlchemyStore,
        tracker: Optional[RiderAvailabilityTracker] = None,
        history: Optional[StatusHistoryRecorder] = None
    ):
        self.store = store
        self.tracker = tracker or RiderAvailabilityTracker(store)
        self.history = history

    async def assign(
        self,
        order_id: str,
        rider_id: str,
        changed_by: Optional[str] = None
    ) -> AssignmentResult:
        """Assign a pending order to an available, active rider"""
        try:
            rider = self.store.get_rider(rider_id)
            if rider is None:
                return self._rejected("assign", order_id, AssignmentError.RIDER_NOT_FOUND)
            if not rider.is_active:
                return self._rejected("assign", order_id, AssignmentError.RIDER_INACTIVE)
            if rider.status != RiderStatus.AVAILABLE.value:
                return self._rejected("assign", order_id, AssignmentError.RIDER_UNAVAILABLE)

            order = self.store.get_order(order_id)
            if order is None:
                return self._rejected("assign", order_id, AssignmentError.ORDER_NOT_FOUND)
            if order.status != OrderStatus.PENDING.value:
                return self._rejected("assign", order_id, AssignmentError.ORDER_NOT_PENDING)
        except DatabaseError as e:
            logger.error(f"Error in assign order {order_id} to rider {rider_id}: {e}")
            return AssignmentResult.fail(AssignmentError.ASSIGN_UNEXPECTED)

        now = datetime.now(timezone.utc)
        try:
            updated = self.store.update_order(
                order_id,
                {
                    "delivery_id": rider_id,
                    "status": OrderStatus.ASSIGNED.value,
                    "assigned_at": now,
                    "updated_at": now,
                },
                expected_statuses=[OrderStatus.PENDING.value]
            )
        except DatabaseError as e:
            logger.error(f"Error updating order {order_id}: {e}")
            return AssignmentResult.fail(AssignmentError.ORDER_UPDATE_FAILED)

        if updated == 0:
            # Another caller moved the order out of pending after our read
            return self._rejected("assign", order_id, AssignmentError.ORDER_NOT_PENDING)

        await self._refresh_rider(rider_id)
        await self._record(order_id, OrderStatus.ASSIGNED.value, f"Asignado a rider {rider_id}", changed_by)

        logger.info(f"Order {order_id} assigned to rider {rider_id}")
        return AssignmentResult.ok()

    async def cancel(
        self,
        order_id: str,
        reason: Optional[str] = None,
        changed_by: Optional[str] = None
    ) -> AssignmentResult:
        """Cancel an order that is not delivered or already cancelled"""
        try:
            order = self.store.get_order(order_id)
            if order is None:
                return self._rejected("cancel", order_id, AssignmentError.ORDER_NOT_FOUND)
            terminal = self._terminal_code(order.status)
            if terminal:
                return self._rejected("cancel", order_id, terminal)
        except DatabaseError as e:
            logger.error(f"Error in cancel order {order_id}: {e}")
            return AssignmentResult.fail(AssignmentError.CANCEL_UNEXPECTED)

        rider_id = order.delivery_id
        notes = cancellation_note(reason, order.notes)
        now = datetime.now(timezone.utc)
        try:
            updated = self.store.update_order(
                order_id,
                {
                    "status": OrderStatus.CANCELLED.value,
                    "cancelled_at": now,
                    "notes": notes,
                    "updated_at": now,
                },
                expected_statuses=CANCELLABLE_STATUSES
            )
        except DatabaseError as e:
            logger.error(f"Error cancelling order {order_id}: {e}")
            return AssignmentResult.fail(AssignmentError.CANCEL_FAILED)

        if updated == 0:
            return self._lost_cancel_race(order_id)

        if rider_id:
            await self._refresh_rider(rider_id, exclude_order_id=order_id, release=True)
        await self._record(order_id, OrderStatus.CANCELLED.value, notes, changed_by)

        logger.info(f"Order {order_id} cancelled")
        return AssignmentResult.ok()

    @staticmethod
    def _terminal_code(status: str) -> Optional[str]:
        if status == OrderStatus.CANCELLED.value:
            return AssignmentError.ALREADY_CANCELLED
        if status == OrderStatus.DELIVERED.value:
            return AssignmentError.ALREADY_DELIVERED
        return None

    def _lost_cancel_race(self, order_id: str) -> AssignmentResult:
        """The order left a cancellable state between our read and write"""
        try:
            order = self.store.get_order(order_id)
        except DatabaseError as e:
            logger.error(f"Error re-reading order {order_id} after cancel: {e}")
            return AssignmentResult.fail(AssignmentError.CANCEL_FAILED)
        if order is None:
            return self._rejected("cancel", order_id, AssignmentError.ORDER_NOT_FOUND)
        code = self._terminal_code(order.status) or AssignmentError.CANCEL_FAILED
        return self._rejected("cancel", order_id, code)

    async def _refresh_rider(self, rider_id: str, exclude_order_id: Optional[str] = None, release: bool = False):
        try:
            await self.tracker.recompute_rider_availability(
                rider_id, exclude_order_id=exclude_order_id, release=release
            )
        except DatabaseError as e:
            # Order change stands; the next recompute for this rider heals it
            logger.error(f"Error updating rider {rider_id}: {e}")

    async def _record(self, order_id: str, status: str, notes: Optional[str], changed_by: Optional[str]):
        if self.history is not None:
            await self.history.record(order_id, status, notes=notes, changed_by=changed_by)

    @staticmethod
    def _rejected(action: str, order_id: str, code: str) -> AssignmentResult:
        logger.info(f"Cannot {action} order {order_id}: {code}")
        return AssignmentResult.fail(code)
