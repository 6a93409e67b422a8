"""Auth user lookup and password overwrite through the Supabase admin API."""

import asyncio
import logging
from typing import Any

from supabase import Client

from src.api.middleware.error_handler import UpstreamError
from src.core.config import Settings, get_settings
from src.core.supabase import get_supabase_client
from src.core.upstream import call_upstream
from src.models.identity import IdentityUser

logger = logging.getLogger(__name__)

_LIST_KEYS = ("users", "data")


def _as_mapping(item: Any) -> dict[str, Any]:
    if isinstance(item, dict):
        return item
    if hasattr(item, "model_dump"):
        return item.model_dump()
    return {"id": getattr(item, "id", None), "email": getattr(item, "email", None)}


def normalize_user_list(raw: Any) -> list[IdentityUser]:
    """Normalize an admin users response into a list of IdentityUser.

    The admin API and its client wrappers return either a bare list, a
    wrapper object holding the list under ``users`` or ``data``, or a
    response object exposing one of those as an attribute. Records
    without an id are dropped. Order is preserved.

    Args:
        raw: The response as returned by the client.

    Returns:
        list[IdentityUser]: Users in the order the collaborator returned them.
    """
    items: Any = raw
    if isinstance(raw, dict):
        items = next((raw[key] for key in _LIST_KEYS if isinstance(raw.get(key), list)), [])
    elif not isinstance(raw, list):
        items = next(
            (getattr(raw, key) for key in _LIST_KEYS if isinstance(getattr(raw, key, None), list)),
            [],
        )

    users: list[IdentityUser] = []
    for item in items:
        record = _as_mapping(item)
        if not record.get("id"):
            continue
        users.append({"id": str(record["id"]), "email": record.get("email")})
    return users


class IdentityService:
    """Client for the auth user store."""

    def __init__(self, settings: Settings | None = None, client: Client | None = None) -> None:
        """Initialize identity service with settings and a Supabase client."""
        self.settings = settings or get_settings()
        self.client = client or get_supabase_client()

    async def find_by_email(self, email: str) -> IdentityUser | None:
        """Find the auth user registered with an email address.

        Pages through the admin user list and returns the first user whose
        email matches case-insensitively, in the order returned. Each page
        has its own per-call timeout and the whole scan is bounded by
        ``identity_lookup_timeout_seconds``.

        Args:
            email: Address to look up.

        Returns:
            IdentityUser | None: The matching user, or None if there is none.

        Raises:
            UpstreamError: If the admin API call fails or the scan runs out
                of time.
        """
        limit = self.settings.identity_lookup_timeout_seconds
        try:
            return await asyncio.wait_for(self._scan_for_email(email), timeout=limit)
        except asyncio.TimeoutError as e:
            logger.error("User lookup for %s exceeded %.1fs", email, limit)
            raise UpstreamError(
                "Failed to fetch user",
                detail=f"User lookup did not finish within {limit:g} seconds",
            ) from e

    async def _scan_for_email(self, email: str) -> IdentityUser | None:
        wanted = email.strip().lower()
        per_page = self.settings.identity_page_size

        for page in range(1, self.settings.identity_max_pages + 1):
            try:
                raw = await call_upstream(
                    "user lookup",
                    self.client.auth.admin.list_users,
                    page=page,
                    per_page=per_page,
                )
            except UpstreamError:
                raise
            except Exception as e:
                logger.error("Admin user lookup failed: %s", str(e))
                raise UpstreamError("Failed to fetch user", detail=str(e)) from e

            users = normalize_user_list(raw)
            match = next((u for u in users if (u["email"] or "").lower() == wanted), None)
            if match:
                logger.info("Resolved %s to user %s", email, match["id"])
                return match
            if len(users) < per_page:
                break

        logger.info("No auth user found for %s", email)
        return None

    async def set_password(self, user_id: str, new_password: str) -> None:
        """Overwrite a user's password.

        Args:
            user_id: Auth user ID.
            new_password: The new password.

        Raises:
            UpstreamError: If the admin API rejects the update.
        """
        try:
            await call_upstream(
                "password update",
                self.client.auth.admin.update_user_by_id,
                user_id,
                {"password": new_password},
            )
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Password update failed for user %s: %s", user_id, str(e))
            raise UpstreamError("Failed to update password", detail=str(e)) from e

        logger.info("Password updated for user %s", user_id)
