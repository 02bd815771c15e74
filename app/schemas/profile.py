"""
Pydantic schemas for the caller's profile
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class ProfileResponse(BaseModel):
    """Profile of the authenticated staff member"""
    id: str
    role: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CurrentUserResponse(BaseModel):
    """Profile plus the permission flags the dashboard renders from"""
    profile: ProfileResponse
    is_admin: bool
    is_sub_admin: bool
    is_soporte: bool
    permissions: dict[str, bool]
