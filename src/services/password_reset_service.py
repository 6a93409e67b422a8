"""Password reset flow: send a code, verify it, then set a new password.

The three steps share no in-process state. Every step that mutates
anything re-runs the code verification against the store, so a code
checked earlier through /verify-code is never trusted at reset time.
"""

import logging
import secrets
from typing import Any

from src.api.middleware.error_handler import ClientError, NotFoundError, UpstreamError
from src.services.email_service import EmailService
from src.services.identity_service import IdentityService
from src.services.reset_code_store import ResetCodeStore

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


def generate_reset_code() -> str:
    """Return a uniformly random six-digit code between 100000 and 999999."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def _clean(value: str | None) -> str:
    return (value or "").strip()


class PasswordResetService:
    """Orchestrates the code store, email dispatcher and identity client."""

    def __init__(
        self,
        store: ResetCodeStore | None = None,
        email_service: EmailService | None = None,
        identity: IdentityService | None = None,
    ) -> None:
        """Initialize the reset flow with its collaborators."""
        self.store = store or ResetCodeStore()
        self.email_service = email_service or EmailService()
        self.identity = identity or IdentityService()

    async def send_code(self, email: str | None) -> dict[str, Any]:
        """Generate, store and email a reset code.

        The code is stored before it is sent; if storing fails nothing is
        sent. If sending fails the stored code is left in place.

        Args:
            email: Recipient address.

        Returns:
            dict: Success payload.

        Raises:
            ClientError: If email is missing.
            ConfigurationError: If the email transport is not configured.
            UpstreamError: If storing or sending fails.
        """
        email = _clean(email)
        if not email:
            raise ClientError("Email required")

        self.email_service.ensure_configured()

        code = generate_reset_code()
        await self.store.insert(email, code)

        result = await self.email_service.send_reset_code(email, code)
        if not result.get("success"):
            raise UpstreamError("Failed to send email", detail=result.get("error"))

        return {"success": True, "message": "Reset code stored and email sent"}

    async def verify_code(self, email: str | None, code: str | None) -> bool:
        """Check a code against the store without changing anything.

        Args:
            email: Address the code was sent to.
            code: Code presented by the caller.

        Returns:
            bool: Whether the store accepts the code.

        Raises:
            ClientError: If a field is missing.
            UpstreamError: If the verification call fails.
        """
        email, code = _clean(email), _clean(code)
        if not email or not code:
            raise ClientError("Email and code required")

        return await self.store.verify(email, code)

    async def reset_password(
        self,
        email: str | None,
        new_password: str | None,
        code: str | None,
    ) -> dict[str, Any]:
        """Verify the code again and overwrite the user's password.

        Args:
            email: Account email.
            new_password: Password to set. Surrounding whitespace is kept.
            code: Code presented by the caller.

        Returns:
            dict: Success payload.

        Raises:
            ClientError: If a field is missing or the code is invalid.
            NotFoundError: If no auth user has this email.
            UpstreamError: If the lookup or update fails.
        """
        email, code = _clean(email), _clean(code)
        new_password = new_password or ""
        if not email or not new_password.strip() or not code:
            raise ClientError("email, new_password and code are required")

        try:
            verified = await self.store.verify(email, code)
        except UpstreamError as e:
            raise ClientError("Invalid or expired code", detail=e.detail) from e
        if not verified:
            raise ClientError("Invalid or expired code")

        user = await self.identity.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        await self.identity.set_password(user["id"], new_password)
        logger.info("Password reset completed for %s", email)

        return {"success": True, "message": "Password updated"}
