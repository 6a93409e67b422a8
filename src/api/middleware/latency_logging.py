"""Per-request access log with latency."""

import logging
import time
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 2000

# Probed by the platform every few seconds.
QUIET_PATHS = frozenset({"/", "/health", "/health/ready"})


def _level_for(path: str, status_code: int, latency_ms: float) -> int:
    if path in QUIET_PATHS and status_code < 500:
        return logging.DEBUG
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400 or latency_ms > SLOW_REQUEST_MS:
        return logging.WARNING
    return logging.INFO


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log ``METHOD path - status - ms`` once per request.

    Almost all time here is spent waiting on Supabase, the mail provider
    or the image host, so slow lines usually mean a slow collaborator.
    Exceptions that escape the inner stack are logged as 500 and re-raised.

    Args:
        request: The incoming request.
        call_next: The next middleware/handler in the chain.

    Returns:
        Response: The response from the handler.
    """
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        latency_ms = (time.perf_counter() - started) * 1000
        path = request.url.path
        slow = " (slow)" if latency_ms > SLOW_REQUEST_MS else ""
        logger.log(
            _level_for(path, status_code, latency_ms),
            "%s %s - %d - %.2fms%s",
            request.method,
            path,
            status_code,
            latency_ms,
            slow,
        )
