"""Request body size limit."""

import logging
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from src.api.middleware.error_handler import create_error_response
from src.core.config import get_settings

logger = logging.getLogger(__name__)


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return 0


def _too_large(request: Request, length: int, limit: int) -> JSONResponse:
    logger.warning("Rejected %s %s: body of %d+ bytes exceeds %d", request.method, request.url.path, length, limit)
    return create_error_response(
        error_type="payload_too_large",
        message=f"Request body exceeds {limit // 1024}KB limit",
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    )


async def request_size_limit_middleware(
    request: Request,
    call_next: Callable[[Request], Response],
) -> Response:
    """Reject bodies larger than ``max_request_body_size`` with 413.

    A declared Content-Length is checked without reading the body. A body
    sent without one (chunked) is read here chunk by chunk and cut off as
    soon as it passes the limit; the bytes read are cached on the request
    and replayed to the route.
    """
    limit = get_settings().max_request_body_size

    length = _declared_length(request)
    if length is not None:
        if length > limit:
            return _too_large(request, length, limit)
        return await call_next(request)

    if "chunked" in request.headers.get("transfer-encoding", "").lower():
        chunks: list[bytes] = []
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
            if received > limit:
                return _too_large(request, received, limit)
            chunks.append(chunk)
        # Same cache Request.body() fills; BaseHTTPMiddleware forwards it downstream.
        request._body = b"".join(chunks)

    return await call_next(request)
