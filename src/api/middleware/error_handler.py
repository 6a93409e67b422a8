"""Global error handling for consistent error responses."""

import logging
import traceback
from typing import Any, Callable

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
        detail: Any = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
            detail: Optional diagnostic payload, passed through untouched.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.detail = detail
        super().__init__(message)


class ClientError(APIError):
    """Missing or invalid input."""

    def __init__(self, message: str = "Invalid request", detail: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type="client_error",
            detail=detail,
        )


class ForbiddenError(APIError):
    """Shared-secret mismatch."""

    def __init__(self, message: str = "Access denied", detail: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_type="forbidden",
            detail=detail,
        )


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", detail: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type="not_found",
            detail=detail,
        )


class UpstreamError(APIError):
    """A collaborator call failed.

    The collaborator's raw diagnostic text is carried in detail and
    never interpreted further.
    """

    def __init__(self, message: str = "Upstream service error", detail: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="upstream_error",
            detail=detail,
        )


class ConfigurationError(APIError):
    """A credential the requested feature needs is not configured."""

    def __init__(self, missing: str) -> None:
        super().__init__(
            message=f"Server misconfigured (missing {missing})",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="configuration_error",
        )


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    detail: Any = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized JSON error response.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        detail: Optional diagnostic payload.
        request_id: Optional request ID for tracing.

    Returns:
        JSONResponse: Formatted error response.
    """
    error_response = ErrorResponse(
        error=error_type,
        message=message,
        detail=detail,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Ensures consistent error response format across the application,
    and that a single failing request never takes the process down.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except APIError as e:
        log = logger.error if e.status_code >= 500 else logger.warning
        log(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            detail=e.detail,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="upstream_error",
            message="Server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
            request_id=request_id,
        )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 rather than FastAPI's 422."""
    request_id = request.headers.get("X-Request-ID")
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        message = "Invalid JSON sent to server"
    else:
        message = "Invalid request body"
    logger.warning("Request validation failed: %s", message, extra={"request_id": request_id})
    return create_error_response(
        error_type="client_error",
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=[{"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg")} for err in errors],
        request_id=request_id,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) in the common shape."""
    message = "Not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return create_error_response(
        error_type="http_error",
        message=message,
        status_code=exc.status_code,
        request_id=request.headers.get("X-Request-ID"),
    )
