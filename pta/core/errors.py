from typing import Any, Dict, Iterable, Optional, Union
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from pta.core.config import settings
from pta.core.logging import logger


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(BaseAPIError):
    """Raised when the caller could not be identified"""
    def __init__(
        self,
        message: str = "Authentication required",
        error_code: str = "AUTH_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            details=details
        )


class TokenError(AuthenticationError):
    """Raised when there's a token-related error"""
    def __init__(
        self,
        message: str = "Invalid or expired token",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="TOKEN_ERROR",
            details=details
        )


class AuthorizationError(BaseAPIError):
    """Raised when the caller's role does not permit the requested scope or write"""
    def __init__(
        self,
        message: str = "Permission denied",
        error_code: str = "PERMISSION_DENIED",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=error_code,
            details=details
        )


class UnknownRoleError(AuthorizationError):
    def __init__(self, message: str = "Unknown Role"):
        super().__init__(message=message, error_code="UNKNOWN_ROLE")


class ValidationError(BaseAPIError):
    """Raised when input validation fails"""
    def __init__(
        self,
        message: str = "Validation error",
        fields: Optional[Iterable[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        self.fields = list(fields or details.get("fields", []))
        if self.fields:
            details["fields"] = self.fields
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details
        )


class NotFoundError(BaseAPIError):
    """Raised when a requested resource is not found"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details
        )


class ConflictError(BaseAPIError):
    """Raised when a write transaction could not complete"""
    def __init__(
        self,
        message: str = "The operation could not be completed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details=details
        )


class StoreUnavailableError(BaseAPIError):
    """Raised when the database cannot be reached"""
    def __init__(
        self,
        message: str = "Database is unavailable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="STORE_UNAVAILABLE",
            details=details
        )


def get_error_message(
    error: Union[Exception, HTTPException, str],
    default_message: str = "An unexpected error occurred",
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Formats error messages into the response envelope.

    Args:
        error: The exception that was raised or error message string
        default_message: Fallback message if error type is not recognized
        include_details: Whether to include error details in response

    Returns:
        Dict containing formatted error response with message, code, and optional details
    """
    error_response = {
        "success": False,
        "error_code": "INTERNAL_ERROR",
        "message": default_message,
        "status_code": 500
    }

    if isinstance(error, str):
        error_response.update({
            "message": error,
            "error_code": "GENERAL_ERROR"
        })
        return error_response

    if isinstance(error, BaseAPIError):
        error_response.update({
            "error_code": error.error_code,
            "message": error.message,
            "status_code": error.status_code
        })
        if include_details and error.details:
            error_response["details"] = error.details

    elif isinstance(error, HTTPException):
        error_response.update({
            "error_code": "HTTP_ERROR",
            "message": str(error.detail),
            "status_code": error.status_code
        })

    elif isinstance(error, SQLAlchemyError):
        error_response.update({
            "error_code": "DB_ERROR",
            "message": "Database error occurred",
            "status_code": 500
        })

    if include_details and not settings.PRODUCTION and error_response["status_code"] >= 500:
        error_response["error_type"] = error.__class__.__name__

    return error_response


def _request_validation_fields(exc: RequestValidationError) -> list:
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
    return fields


def register_exception_handlers(app: FastAPI) -> None:
    """Render every application error with the same envelope"""

    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.message}", extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=exc.status_code, content=get_error_message(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(
            "Invalid request data",
            fields=_request_validation_fields(exc),
        )
        return JSONResponse(status_code=error.status_code, content=get_error_message(error))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Unhandled database error", exc_info=exc, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=500, content=get_error_message(exc))

    @app.exception_handler(ConnectionError)
    @app.exception_handler(TimeoutError)
    async def connection_error_handler(request: Request, exc: Exception):
        logger.error(f"Database connection failed: {type(exc).__name__}", extra={"request_id": _request_id(request)})
        error = StoreUnavailableError()
        return JSONResponse(status_code=error.status_code, content=get_error_message(error))


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)
