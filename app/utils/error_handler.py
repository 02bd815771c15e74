"""
Error handling utilities shared by services and routers
"""

import uuid
import logging
from typing import Optional
from datetime import datetime, timezone
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

class ErrorContext:
    """Context object for tracking error information across the request lifecycle"""

    def __init__(self, request: Request):
        self.request_id = str(uuid.uuid4())
        self.request = request
        self.endpoint = str(request.url.path)
        self.method = request.method
        self.client_ip = self._get_client_ip()
        self.user_agent = request.headers.get("user-agent")
        self.timestamp = datetime.now(timezone.utc)

    def _get_client_ip(self) -> Optional[str]:
        """Extract client IP from request headers"""
        if "x-forwarded-for" in self.request.headers:
            return self.request.headers["x-forwarded-for"].split(",")[0].strip()
        elif "x-real-ip" in self.request.headers:
            return self.request.headers["x-real-ip"]
        elif self.request.client:
            return self.request.client.host
        return None

class DatabaseError(Exception):
    """Failure talking to the data store (connectivity, constraint, driver errors)"""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

class ErrorHandler:
    """Builds the JSON body returned for errors that escape a router"""

    @staticmethod
    def create_error_response(
        error_context: ErrorContext,
        error: Exception,
        status_code: int = 500
    ) -> JSONResponse:
        ErrorHandler._log_error(error_context, error, status_code)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": ErrorHandler._get_error_code(error),
                    "message": ErrorHandler._get_user_friendly_message(error),
                    "request_id": error_context.request_id,
                    "timestamp": error_context.timestamp.isoformat(),
                    "endpoint": error_context.endpoint,
                    "method": error_context.method
                }
            }
        )

    @staticmethod
    def _get_error_code(error: Exception) -> str:
        if isinstance(error, HTTPException):
            return f"HTTP_{error.status_code}"
        if isinstance(error, DatabaseError):
            return "DATABASE_ERROR"
        return "INTERNAL_ERROR"

    @staticmethod
    def _get_user_friendly_message(error: Exception) -> str:
        if isinstance(error, HTTPException):
            return error.detail
        if isinstance(error, DatabaseError):
            return "A database error occurred. Please try again later."
        return "An unexpected error occurred. Please try again later."

    @staticmethod
    def _log_error(error_context: ErrorContext, error: Exception, status_code: int):
        logger.error(
            f"Error {error_context.request_id}: {type(error).__name__} in {error_context.method} {error_context.endpoint}",
            extra={
                "request_id": error_context.request_id,
                "status_code": status_code,
                "client_ip": error_context.client_ip,
                "user_agent": error_context.user_agent,
            },
            exc_info=error
        )
