"""Storage and verification of one-time reset codes in Supabase."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from src.api.middleware.error_handler import UpstreamError
from src.core.config import Settings, get_settings
from src.core.supabase import get_supabase_client
from src.core.upstream import call_upstream
from src.models.password_reset import ResetRequest

logger = logging.getLogger(__name__)


def normalize_verification_result(raw: Any) -> bool:
    """Collapse the verify RPC's response into a boolean.

    Depending on how the procedure is declared, PostgREST hands back a
    JSON boolean, the text ``true``, or a JSON-encoded string ``"true"``.
    Only those spell a valid code; everything else is False.

    Args:
        raw: The RPC response data as decoded by the client.

    Returns:
        bool: Whether the code was accepted.
    """
    if raw is True:
        return True
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        text = raw.strip()
        if text == "true":
            return True
        try:
            parsed = json.loads(text)
        except ValueError:
            return False
        return parsed is True or parsed == "true"
    return False


class ResetCodeStore:
    """Client for the password_resets table and its verify procedure.

    Both operations are single calls with the service role key. Failures
    are surfaced immediately; there is no retry.
    """

    def __init__(self, settings: Settings | None = None, client: Client | None = None) -> None:
        """Initialize the store with settings and a Supabase client."""
        self.settings = settings or get_settings()
        self.client = client or get_supabase_client()

    async def insert(self, email: str, code: str) -> ResetRequest:
        """Persist a new reset code.

        Args:
            email: Address the code belongs to.
            code: The six-digit code.

        Returns:
            ResetRequest: The row as sent to the store.

        Raises:
            UpstreamError: If the store rejects the insert.
        """
        row: ResetRequest = {
            "email": email,
            "code": code,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        query = self.client.table(self.settings.reset_table).insert(row)
        try:
            await call_upstream("reset code insert", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Reset code insert failed for %s: %s", email, str(e))
            raise UpstreamError("Failed to store reset code", detail=str(e)) from e

        logger.info("Reset code stored for %s", email)
        return row

    async def verify(self, email: str, code: str) -> bool:
        """Ask the store whether a code is currently valid for an email.

        Freshness, expiry and single-use rules all live in the procedure.

        Args:
            email: Address the code was sent to.
            code: The code presented by the caller.

        Returns:
            bool: Normalized validity.

        Raises:
            UpstreamError: If the procedure call fails.
        """
        query = self.client.rpc(
            self.settings.verify_rpc,
            {"user_email": email, "user_code": code},
        )
        try:
            response = await call_upstream("reset code verification", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Verify RPC failed for %s: %s", email, str(e))
            raise UpstreamError("RPC failed", detail=str(e)) from e

        valid = normalize_verification_result(response.data)
        logger.info("Verify RPC for %s returned valid=%s", email, valid)
        return valid
