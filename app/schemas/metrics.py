"""
Pydantic schemas for dashboard metrics
"""

from pydantic import BaseModel

class DashboardMetricsResponse(BaseModel):
    active_orders: int
    available_riders: int
    today_revenue: float
    completed_today: int
