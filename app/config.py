"""
Runtime configuration read from the environment
"""

import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pideai_admin.db")

# Signing secret of the external identity provider's access tokens
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "your-jwt-secret-change-in-production")
AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() not in ("0", "false", "no")
