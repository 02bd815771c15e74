"""
Order endpoints: listing, detail, assignment and cancellation
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
import logging

from app.database import get_db
from app.models.enums import OrderStatus
from app.models.profile import Profile
from app.schemas.order import (
    OrderResponse, OrderListResponse, OrderStatusHistoryResponse,
    AssignRiderRequest, CancelOrderRequest, AssignmentResultResponse
)
from app.services.assignment import OrderAssignmentWorkflow
from app.services.data_access import SqlAlchemyStore
from app.services.metrics import OrderQueryService
from app.services.status_history import StatusHistoryRecorder
from app.auth.auth_handler import soporte_required, sub_admin_required
from app.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

def get_workflow(db: Session = Depends(get_db)) -> OrderAssignmentWorkflow:
    """Workflow bound to the request's database session"""
    return OrderAssignmentWorkflow(SqlAlchemyStore(db), history=StatusHistoryRecorder(db))

@router.get("/", response_model=OrderListResponse)
@limiter.limit("60/minute")
async def get_orders(
    request: Request,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    rider_id: Optional[str] = Query(None, description="Filter by assigned rider"),
    store_id: Optional[str] = Query(None, description="Filter by store"),
    is_urgent: Optional[bool] = Query(None, description="Only urgent or non-urgent orders"),
    search: Optional[str] = Query(None, max_length=50, description="Search by order number"),
    date_from: Optional[datetime] = Query(None, description="Created at or after"),
    date_to: Optional[datetime] = Query(None, description="Created at or before"),
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Get paginated list of orders with optional filtering"""
    try:
        return OrderQueryService(db).list_orders(
            page=page,
            page_size=page_size,
            status=status.value if status else None,
            rider_id=rider_id,
            store_id=store_id,
            is_urgent=is_urgent,
            search=search,
            date_from=date_from,
            date_to=date_to
        )
    except Exception as e:
        logger.error(f"Failed to get orders: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve orders")

@router.get("/{order_id}", response_model=OrderResponse)
@limiter.limit("60/minute")
async def get_order(
    request: Request,
    order_id: str,
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Get a specific order by ID"""
    try:
        order = OrderQueryService(db).get_order(order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve order")

@router.get("/{order_id}/history", response_model=list[OrderStatusHistoryResponse])
@limiter.limit("60/minute")
async def get_order_history(
    request: Request,
    order_id: str,
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Status changes recorded for an order, oldest first"""
    try:
        if not OrderQueryService(db).get_order(order_id):
            raise HTTPException(status_code=404, detail="Order not found")
        return StatusHistoryRecorder(db).for_order(order_id)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get history of order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve order history")

@router.post("/{order_id}/assign", response_model=AssignmentResultResponse)
@limiter.limit("30/minute")
async def assign_order(
    request: Request,
    order_id: str,
    body: AssignRiderRequest,
    current_user: Profile = Depends(sub_admin_required),
    workflow: OrderAssignmentWorkflow = Depends(get_workflow)
):
    """Assign a pending order to a rider; failures are reported in the body"""
    result = await workflow.assign(order_id, body.rider_id, changed_by=current_user.id)
    if result.success:
        logger.info(f"{current_user.email} assigned order {order_id} to rider {body.rider_id}")
    return result.to_dict()

@router.post("/{order_id}/cancel", response_model=AssignmentResultResponse)
@limiter.limit("30/minute")
async def cancel_order(
    request: Request,
    order_id: str,
    body: Optional[CancelOrderRequest] = None,
    current_user: Profile = Depends(sub_admin_required),
    workflow: OrderAssignmentWorkflow = Depends(get_workflow)
):
    """Cancel an order; failures are reported in the body"""
    reason = body.reason if body else None
    result = await workflow.cancel(order_id, reason=reason, changed_by=current_user.id)
    if result.success:
        logger.info(f"{current_user.email} cancelled order {order_id}")
    return result.to_dict()
