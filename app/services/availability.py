"""
Rider availability: who can take a new order, and keeping rider status in
step with the orders they carry
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
import logging

from app.models.rider import Rider
from app.models.enums import RiderStatus, ACTIVE_ORDER_STATUSES
from app.services.data_access import SqlAlchemyStore

logger = logging.getLogger(__name__)

def is_assignable(rider: Rider) -> bool:
    """A rider can receive a new order only when available and active"""
    return rider.status == RiderStatus.AVAILABLE.value and bool(rider.is_active)

def rank(riders: Sequence[Rider], active_counts: Dict[str, int]) -> List[Rider]:
    """Order riders from least to most loaded; ties by name, then id"""
    return sorted(
        riders,
        key=lambda rider: (active_counts.get(rider.id, 0), rider.full_name or "", rider.id)
    )

@dataclass
class RankedRider:
    rider: Rider
    active_orders: int

class RiderAvailabilityTracker:
    """Derives assignability and restores the busy/available invariant"""

    def __init__(self, store: SqlAlchemyStore):
        self.store = store

    def active_order_count(self, rider_id: str, exclude_order_id: Optional[str] = None) -> int:
        return self.store.count_orders(
            delivery_id=rider_id,
            status_in=ACTIVE_ORDER_STATUSES,
            exclude_order_id=exclude_order_id
        )

    def list_assignable_riders(self) -> List[RankedRider]:
        riders = [rider for rider in self.store.list_available_riders() if is_assignable(rider)]
        counts = self.store.active_order_counts([rider.id for rider in riders], ACTIVE_ORDER_STATUSES)
        return [RankedRider(rider=rider, active_orders=counts.get(rider.id, 0)) for rider in rank(riders, counts)]

    async def recompute_rider_availability(
        self,
        rider_id: str,
        exclude_order_id: Optional[str] = None,
        release: bool = False
    ) -> Optional[str]:
        """
        Make the rider busy iff it still carries an assigned or in-transit order.

        Called after every assignment and cancellation. A plain recount leaves
        an offline rider offline. With release=True (after a cancellation) a
        rider left with no active orders becomes available whatever its
        current status. Returns the rider's resulting status, or None when the
        rider does not exist.
        """
        rider = self.store.get_rider(rider_id)
        if rider is None:
            logger.warning(f"Cannot recompute availability of missing rider {rider_id}")
            return None

        active = self.active_order_count(rider_id, exclude_order_id=exclude_order_id)
        if rider.status == RiderStatus.OFFLINE.value and (active > 0 or not release):
            return rider.status

        target = RiderStatus.BUSY.value if active > 0 else RiderStatus.AVAILABLE.value

        if rider.status != target:
            self.store.update_rider(
                rider_id,
                {"status": target, "updated_at": datetime.now(timezone.utc)}
            )
            logger.info(f"Rider {rider_id} is now {target} ({active} active orders)")

        return target
