"""
Rider endpoints: listings, assignable riders and activation
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Optional
import logging

from app.database import get_db
from app.models.enums import RiderStatus
from app.models.profile import Profile
from app.schemas.rider import (
    RiderResponse, RiderWithLoadResponse, RiderListResponse, RiderActiveUpdate
)
from app.services.availability import RiderAvailabilityTracker
from app.services.data_access import SqlAlchemyStore
from app.services.metrics import RiderQueryService
from app.auth.auth_handler import soporte_required, admin_required
from app.utils.error_handler import DatabaseError
from app.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

def _with_load(rider, active_orders: int) -> RiderWithLoadResponse:
    return RiderWithLoadResponse.model_validate(rider).model_copy(update={"active_orders": active_orders})

@router.get("/", response_model=RiderListResponse)
@limiter.limit("60/minute")
async def get_riders(
    request: Request,
    status: Optional[RiderStatus] = Query(None, description="Filter by status"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    search: Optional[str] = Query(None, max_length=100, description="Search by name or phone"),
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """All riders, newest first, with their active order count"""
    try:
        rows = RiderQueryService(db).list_riders(
            status=status.value if status else None,
            is_active=is_active,
            search=search
        )
        riders = [_with_load(rider, count) for rider, count in rows]
        return RiderListResponse(riders=riders, count=len(riders))

    except Exception as e:
        logger.error(f"Failed to get riders: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve riders")

@router.get("/available", response_model=RiderListResponse)
@limiter.limit("60/minute")
async def get_available_riders(
    request: Request,
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Assignable riders, least loaded first"""
    try:
        ranked = RiderAvailabilityTracker(SqlAlchemyStore(db)).list_assignable_riders()
        riders = [_with_load(item.rider, item.active_orders) for item in ranked]
        return RiderListResponse(riders=riders, count=len(riders))

    except DatabaseError as e:
        logger.error(f"Failed to get available riders: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve available riders")

@router.get("/{rider_id}", response_model=RiderWithLoadResponse)
@limiter.limit("60/minute")
async def get_rider(
    request: Request,
    rider_id: str,
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Get a specific rider by ID"""
    try:
        store = SqlAlchemyStore(db)
        rider = store.get_rider(rider_id)
        if not rider:
            raise HTTPException(status_code=404, detail="Rider not found")
        return _with_load(rider, RiderAvailabilityTracker(store).active_order_count(rider_id))

    except HTTPException:
        raise
    except DatabaseError as e:
        logger.error(f"Failed to get rider {rider_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve rider")

@router.patch("/{rider_id}/active", response_model=RiderResponse)
@limiter.limit("10/minute")
async def set_rider_active(
    request: Request,
    rider_id: str,
    update: RiderActiveUpdate,
    current_user: Profile = Depends(admin_required),
    db: Session = Depends(get_db)
):
    """Enable or disable a rider for new assignments"""
    try:
        store = SqlAlchemyStore(db)
        updated = store.update_rider(
            rider_id,
            {"is_active": update.is_active, "updated_at": datetime.now(timezone.utc)}
        )
        if not updated:
            raise HTTPException(status_code=404, detail="Rider not found")

        logger.info(f"{current_user.email} set rider {rider_id} is_active={update.is_active}")
        return store.get_rider(rider_id)

    except HTTPException:
        raise
    except DatabaseError as e:
        logger.error(f"Failed to update rider {rider_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update rider")
