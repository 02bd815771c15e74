"""
Dashboard metrics endpoint
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.models.profile import Profile
from app.schemas.metrics import DashboardMetricsResponse
from app.services.metrics import MetricsService
from app.auth.auth_handler import soporte_required
from app.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/dashboard", response_model=DashboardMetricsResponse)
@limiter.limit("60/minute")
async def get_dashboard_metrics(
    request: Request,
    current_user: Profile = Depends(soporte_required),
    db: Session = Depends(get_db)
):
    """Active orders, available riders, and today's deliveries and revenue"""
    try:
        return MetricsService(db).dashboard()
    except Exception as e:
        logger.error(f"Failed to compute dashboard metrics: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve metrics")
