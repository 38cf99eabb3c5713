"""
Custom Exceptions for the Gatehouse Application

This module defines custom exception classes used throughout the application
for better error handling and debugging, plus the FastAPI handlers that turn
them into JSON error responses.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gatehouse.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    TENANT_MISMATCH = "TENANT_MISMATCH"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Business logic errors
    CONFLICT = "CONFLICT"
    VISITOR_ALREADY_CHECKED_IN = "VISITOR_ALREADY_CHECKED_IN"
    VISITOR_ALREADY_CHECKED_OUT = "VISITOR_ALREADY_CHECKED_OUT"
    VISITOR_NOT_CHECKED_IN = "VISITOR_NOT_CHECKED_IN"
    PACKAGE_ALREADY_PICKED = "PACKAGE_ALREADY_PICKED"

    # External service errors
    PUSH_SERVICE_ERROR = "PUSH_SERVICE_ERROR"
    EMAIL_SERVICE_ERROR = "EMAIL_SERVICE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when input is missing or malformed"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, 400)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class ConflictError(BaseAppException):
    """Exception raised when a state transition is not allowed"""

    def __init__(
        self,
        message: str = "Operation conflicts with current state",
        error_code: ErrorCode = ErrorCode.CONFLICT,
        resource_id: Optional[str] = None
    ):
        details = {"resource_id": resource_id} if resource_id else {}
        super().__init__(message, error_code, details, 409)


class PreconditionFailedError(ConflictError):
    """Exception raised when a transition skips a required earlier state"""
    pass


class InternalError(BaseAppException):
    """Generic failure whose cause must not leak to the caller"""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, ErrorCode.INTERNAL_ERROR, None, 500)


# ========================================
# Authentication & Authorization Exceptions
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(
        self,
        message: str = "Unauthorized",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 401)


class AuthorizationError(BaseAppException):
    """Exception raised when authorization fails"""

    def __init__(
        self,
        message: str = "Forbidden",
        required_role: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.AUTHORIZATION_FAILED
    ):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message, error_code, details, 403)


class TokenExpiredError(AuthenticationError):
    """Exception raised when a bearer token has expired"""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


class InvalidTokenError(AuthenticationError):
    """Exception raised when a bearer token is invalid"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, ErrorCode.TOKEN_INVALID)


# ========================================
# Database Exceptions
# ========================================

class DatabaseError(InternalError):
    """Exception raised when database operations fail"""

    def __init__(
        self,
        message: str = "Internal server error",
        operation: Optional[str] = None,
        table: Optional[str] = None
    ):
        super().__init__(message)
        self.error_code = ErrorCode.DATABASE_ERROR
        self.details = {"operation": operation, "table": table}


# ========================================
# External Service Exceptions
# ========================================

class NotificationError(BaseAppException):
    """Base class for delivery failures; never surfaced to API callers"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 503)


class PushDeliveryError(NotificationError):
    """Exception raised when the push transport rejects or fails a batch"""

    def __init__(self, message: str = "Push delivery failed", batch_size: Optional[int] = None):
        details = {"batch_size": batch_size} if batch_size is not None else {}
        super().__init__(message, ErrorCode.PUSH_SERVICE_ERROR, details)


class EmailDeliveryError(NotificationError):
    """Exception raised when the mail transport fails"""

    def __init__(self, message: str = "Email delivery failed", recipient: Optional[str] = None):
        details = {"recipient": recipient} if recipient else {}
        super().__init__(message, ErrorCode.EMAIL_SERVICE_ERROR, details)


# ========================================
# Handlers
# ========================================

async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Request failed: {exc!r}", extra={"path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        field_errors.setdefault(location or "request", []).append(error.get("msg", "Invalid value"))
    error = ValidationError("Missing or invalid request fields", field_errors)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error: {exc}",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
        exc_info=True,
    )
    return JSONResponse(status_code=500, content=InternalError().to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON error rendering for the application exception taxonomy."""
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'ValidationError',
    'ResourceNotFoundError',
    'ConflictError',
    'PreconditionFailedError',
    'InternalError',
    'AuthenticationError',
    'AuthorizationError',
    'TokenExpiredError',
    'InvalidTokenError',
    'DatabaseError',
    'NotificationError',
    'PushDeliveryError',
    'EmailDeliveryError',
    'register_exception_handlers',
]
