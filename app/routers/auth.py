"""
Authentication endpoints for the signed-in staff member
Sign-in, sign-out and password flows live at the identity provider.
"""

from fastapi import APIRouter, Depends, Request
import logging

from app.auth.auth_handler import get_current_profile
from app.auth.permissions import Role, has_permission, is_admin, is_sub_admin, is_soporte
from app.models.profile import Profile
from app.schemas.profile import CurrentUserResponse, ProfileResponse
from app.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/me", response_model=CurrentUserResponse)
@limiter.limit("60/minute")
async def get_me(
    request: Request,
    profile: Profile = Depends(get_current_profile)
):
    """Current profile and what it is allowed to do"""
    return CurrentUserResponse(
        profile=ProfileResponse.model_validate(profile),
        is_admin=is_admin(profile.role),
        is_sub_admin=is_sub_admin(profile.role),
        is_soporte=is_soporte(profile.role),
        permissions={role.value: has_permission(profile.role, role) for role in Role}
    )
