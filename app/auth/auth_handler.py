"""
Authentication and authorization handler for PideAI Admin
Sign-in happens at the external identity provider; this module only verifies
its access tokens and maps them to a staff profile.
"""

from typing import Optional
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session
import logging

from app.config import AUTH_JWT_SECRET, AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE
from app.database import get_db
from app.models.profile import Profile
from app.auth.permissions import Role, has_permission, parse_role

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

class AuthHandler:
    """Verifies identity provider tokens"""

    def __init__(
        self,
        secret: str = AUTH_JWT_SECRET,
        algorithm: str = AUTH_JWT_ALGORITHM,
        audience: Optional[str] = AUTH_JWT_AUDIENCE
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    def verify_token(self, token: str) -> dict:
        """Verify and decode an access token"""
        try:
            options = {"verify_aud": bool(self.audience)}
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options
            )
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

auth_handler = AuthHandler()

def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """Dependency to get the profile of the authenticated caller"""
    if credentials is None:
        raise _unauthorized()

    payload = auth_handler.verify_token(credentials.credentials)
    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise _unauthorized()

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile is None:
        logger.warning(f"Authenticated identity {user_id} has no profile")
        raise _unauthorized()

    return profile

# Role-based access control
class RoleChecker:
    """Require a minimum role in the hierarchy"""

    def __init__(self, required_role: Role):
        self.required_role = required_role

    def __call__(self, profile: Profile = Depends(get_current_profile)) -> Profile:
        if parse_role(profile.role) is None:
            logger.warning(f"Profile {profile.id} has unrecognized role '{profile.role}'")
        if not has_permission(profile.role, self.required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted"
            )
        return profile

# Common role checkers
admin_required = RoleChecker(Role.ADMIN)
sub_admin_required = RoleChecker(Role.SUB_ADMIN)
soporte_required = RoleChecker(Role.SOPORTE)
