"""Bounded execution of blocking collaborator calls."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from starlette.concurrency import run_in_threadpool

from src.api.middleware.error_handler import UpstreamError
from src.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_upstream(
    operation: str,
    func: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """Run a blocking SDK call in the threadpool with a deadline.

    The SDKs used here (supabase, resend, smtplib, cloudinary) are
    synchronous, so each call is pushed off the event loop. A call that
    outlives the deadline is reported as an UpstreamError; the worker
    thread is left to finish on its own.

    Args:
        operation: Short description used in logs and error messages.
        func: The blocking callable.
        *args: Positional arguments for func.
        timeout: Deadline in seconds. Defaults to upstream_timeout_seconds.
        **kwargs: Keyword arguments for func.

    Returns:
        Whatever func returns.

    Raises:
        UpstreamError: If the call does not finish in time.
    """
    limit = timeout if timeout is not None else get_settings().upstream_timeout_seconds
    try:
        return await asyncio.wait_for(run_in_threadpool(func, *args, **kwargs), timeout=limit)
    except asyncio.TimeoutError as e:
        logger.error("%s timed out after %.1fs", operation, limit)
        raise UpstreamError(
            f"{operation} timed out",
            detail=f"No response within {limit:g} seconds",
        ) from e
