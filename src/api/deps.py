"""FastAPI dependency injection functions."""

import secrets
from typing import Annotated

from fastapi import Header

from src.api.middleware.error_handler import ConfigurationError, ForbiddenError
from src.core.config import get_settings


def _matches(provided: str, expected: str) -> bool:
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_avatar_key(
    apikey: Annotated[str, Header(description="Shared avatar secret")] = "",
    x_apikey: Annotated[str, Header(description="Shared avatar secret (alternate header)")] = "",
    authorization: Annotated[str, Header(description="Bearer <shared avatar secret>")] = "",
) -> None:
    """Require the shared avatar secret on the request.

    The secret may be sent as ``apikey``, ``x-apikey`` or as a Bearer token
    in ``Authorization``.

    Raises:
        ConfigurationError: If the server has no avatar secret configured.
        ForbiddenError: If the secret is missing or wrong.
    """
    expected = get_settings().avatar_api_key
    if not expected:
        raise ConfigurationError("AVATAR_API_KEY")

    provided = (apikey or x_apikey or authorization).strip()
    if provided.startswith("Bearer "):
        provided = provided[len("Bearer "):].strip()

    if not provided or not _matches(provided, expected):
        raise ForbiddenError("Unauthorized. Provide service apikey header.")


def check_delete_token(provided: str | None) -> None:
    """Validate a delete token taken from a header or the request body.

    Raises:
        ConfigurationError: If the server has no delete token configured.
        ForbiddenError: If the token is missing or wrong.
    """
    expected = get_settings().delete_token
    if not expected:
        raise ConfigurationError("DELETE_TOKEN")
    if not provided or not _matches(provided, expected):
        raise ForbiddenError("Invalid or missing delete token")
