"""
Shared HTTP error classes and utilities for the event platform services.

Provides:
- Base exception class for API errors
- Common subclasses (Validation, Auth, NotFound, Service)
- Shared error response model
- Utility to convert exceptions to error responses
- FastAPI exception handler registration

Common Usage Patterns:
=====================

Basic Exception Usage:
>>> from services.common.http_errors import ValidationError, NotFoundError, AuthError
>>>
>>> # Validation error with field context
>>> error = ValidationError("Title is required", field="title")
>>>
>>> # Resource not found
>>> error = NotFoundError("Event", "evt-123")
>>>
>>> # Authentication failure
>>> error = AuthError("Not authenticated")

FastAPI Integration:
>>> from fastapi import FastAPI
>>> from services.common.http_errors import register_exception_handlers
>>>
>>> app = FastAPI()
>>> register_exception_handlers(app)

Storage failure surfaced as a generic server error:
>>> from services.common.http_errors import ServiceError, ErrorCode
>>>
>>> error = ServiceError(
...     "Failed to check event conflicts",
...     code=ErrorCode.DATABASE_ERROR,
...     status_code=500,
... )

Error Code Taxonomy:
===================
- VALIDATION_* : Input validation errors (422)
- AUTH_* : Authentication errors (401)
- ACCESS_* : Authorization/permission errors (403)
- NOT_FOUND : Resource not found (404)
- SERVICE_* / DATABASE_ERROR : Internal service errors (5xx)
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from services.common.logging_config import request_id_var


def current_request_id() -> str:
    """Request ID of the request being served, or a fresh UUID outside a request."""
    request_id = request_id_var.get()
    if request_id and request_id != "uninitialized":
        return request_id
    return str(uuid.uuid4())


class ErrorCode(str, Enum):
    """
    Standardized error codes for the event platform services.

    Categories:
        - General: Common errors that apply across all services
        - Authentication: Caller identity errors
        - Authorization: Permission and ownership errors
        - Service: Internal service and infrastructure errors
    """

    # ==========================================
    # GENERAL ERRORS (4xx client errors)
    # ==========================================
    VALIDATION_FAILED = "VALIDATION_FAILED"  # HTTP 422 - Input validation failed
    NOT_FOUND = "NOT_FOUND"  # HTTP 404 - Resource not found

    # ==========================================
    # AUTHENTICATION ERRORS (401 Unauthorized)
    # ==========================================
    AUTH_FAILED = "AUTH_FAILED"  # Generic authentication failure
    TOKEN_INVALID = "TOKEN_INVALID"  # API key or token invalid

    # ==========================================
    # AUTHORIZATION ERRORS (403 Forbidden)
    # ==========================================
    ACCESS_DENIED = "ACCESS_DENIED"  # Caller does not own the resource

    # ==========================================
    # SERVICE ERRORS (5xx server errors)
    # ==========================================
    SERVICE_ERROR = "SERVICE_ERROR"  # Generic service error
    DATABASE_ERROR = "DATABASE_ERROR"  # Database connectivity/operation error


class ErrorResponse(BaseModel):
    """
    Standardized error response model for all platform services.

    Attributes:
        type: Error type categorization (e.g., "validation_error", "auth_error")
        message: Human-readable error message for end users
        details: Optional dictionary containing additional error context
        timestamp: ISO 8601 timestamp of when the error occurred
        request_id: Unique identifier for tracing and debugging purposes
    """

    type: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: str
    request_id: str


class APIException(Exception):
    """
    Base exception class for all platform API errors.

    Every service exception inherits from this class so that handlers can
    render a consistent ErrorResponse with the right status code.

    Args:
        message: The error message to display to users
        details: Optional dictionary with additional error context
        error_type: Error category string (defaults to "internal_error")
        error_code: Specific error code from ErrorCode enum
        status_code: HTTP status code (defaults to 500)
        request_id: Optional request ID (auto-generated if not provided)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_type: str = "internal_error",
        error_code: Optional[ErrorCode] = None,
        status_code: int = 500,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.error_type = error_type
        self.error_code = error_code
        self.status_code = status_code
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.request_id = request_id or current_request_id()
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """
        Convert exception to ErrorResponse Pydantic model.

        The error code, when present, is folded into ``details["code"]``.
        """
        details = {
            **self.details,
            **({"code": self.error_code.value} if self.error_code else {}),
        }
        return ErrorResponse(
            type=self.error_type,
            message=self.message,
            details=details if details else None,
            timestamp=self.timestamp,
            request_id=self.request_id,
        )


class ValidationError(APIException):
    """
    Exception for input validation errors (HTTP 422).

    Examples:
        >>> error = ValidationError("Title is required", field="title")
        >>> error = ValidationError(
        ...     "Invalid action",
        ...     field="action",
        ...     value="maybe",
        ...     details={"allowed": ["accept", "decline"]},
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        validation_details = details or {}
        if field:
            validation_details["field"] = field
        if value is not None:
            validation_details["value"] = str(value)
        super().__init__(
            message=message,
            details=validation_details,
            error_type="validation_error",
            error_code=ErrorCode.VALIDATION_FAILED,
            status_code=422,
        )
        self.field = field
        self.value = value


class NotFoundError(APIException):
    """
    Exception for resource not found errors (HTTP 404).

    Examples:
        >>> error = NotFoundError("Event", "evt-123")
        >>> print(error.message)
        Event evt-123 not found

        >>> error = NotFoundError("Invitation")
        >>> print(error.message)
        Invitation not found
    """

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if identifier:
            message = f"{resource} {identifier} not found"
        else:
            message = f"{resource} not found"
        notfound_details = {
            **(details or {}),
            "resource": resource,
            "identifier": identifier,
        }
        super().__init__(
            message=message,
            details=notfound_details,
            error_type="not_found",
            error_code=ErrorCode.NOT_FOUND,
            status_code=404,
        )
        self.resource = resource
        self.identifier = identifier


class AuthError(APIException):
    """
    Exception for authentication and authorization errors (HTTP 401 by default).

    Pass ``status_code=403`` with ``code=ErrorCode.ACCESS_DENIED`` when the
    caller is known but not allowed to act on the resource.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.AUTH_FAILED,
        status_code: int = 401,
    ):
        super().__init__(
            message=message,
            details=details,
            error_type="auth_error",
            error_code=code,
            status_code=status_code,
        )


class ServiceError(APIException):
    """
    Exception for internal service errors (HTTP 502 by default).

    Used when internal operations fail, such as database connectivity
    issues or downstream failures.

    Examples:
        >>> error = ServiceError(
        ...     "Database connection failed",
        ...     code=ErrorCode.DATABASE_ERROR,
        ...     details={"database": "postgresql"},
        ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.SERVICE_ERROR,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            details=details,
            error_type="service_error",
            error_code=code,
            status_code=status_code,
        )


def exception_to_response(exc: Exception) -> ErrorResponse:
    """
    Convert any exception to a standardized ErrorResponse Pydantic model.

    1. APIException: Uses the built-in to_error_response() method
    2. HTTPException: Extracts detail information and normalizes format
    3. Generic Exception: Creates a safe internal error response

    Note:
        Generic exceptions only expose their type name, never their message,
        so driver or SQL text does not leak to API clients.
    """
    if isinstance(exc, APIException):
        return exc.to_error_response()
    elif isinstance(exc, HTTPException):
        detail = (
            exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
        )
        return ErrorResponse(
            type="http_error",
            message=detail.get("message", "HTTP error"),
            details=detail,
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=current_request_id(),
        )
    else:
        return ErrorResponse(
            type="internal_error",
            message="Internal server error",
            details={"error_type": type(exc).__name__},
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=current_request_id(),
        )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the standard exception handlers on a FastAPI application.

    Behavior:
        - APIException: Returns exception's status_code with error details
        - HTTPException: Returns exception's status_code with normalized details
        - Generic Exception: Returns 500 status with safe error message

    Call once during application initialization, right after creating the
    FastAPI app instance.
    """
    from fastapi import Request
    from fastapi.responses import JSONResponse

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        error_response = exc.to_error_response()
        return JSONResponse(
            status_code=exc.status_code, content=error_response.model_dump()
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        error_response = exception_to_response(exc)
        return JSONResponse(
            status_code=exc.status_code, content=error_response.model_dump()
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; always a 500."""
        error_response = exception_to_response(exc)
        return JSONResponse(status_code=500, content=error_response.model_dump())
