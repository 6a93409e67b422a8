"""Email service for delivering reset codes via Resend or SMTP."""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Any

import resend

from src.api.middleware.error_handler import ConfigurationError, UpstreamError
from src.core.config import Settings, get_settings
from src.core.upstream import call_upstream

logger = logging.getLogger(__name__)


def build_reset_email(code: str) -> tuple[str, str]:
    """Build the text and HTML bodies of a reset code email."""
    text_content = f"""Your reset code is: {code}

Enter this code in the app to choose a new password.
If you didn't request a password reset, you can safely ignore this email.
"""

    html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Your password reset code</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <p style="font-size: 16px;">Your reset code is:</p>
    <div style="text-align: center; margin: 30px 0;">
        <span style="font-size: 32px; font-weight: 700; letter-spacing: 8px;">{code}</span>
    </div>
    <p style="font-size: 12px; color: #9ca3af; text-align: center;">
        If you didn't request a password reset, you can safely ignore this email.
    </p>
</body>
</html>
"""
    return text_content, html_content


class EmailService:
    """Service for sending reset codes by email."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize email service from settings."""
        self.settings = settings or get_settings()
        self.provider = self.settings.email_provider.lower()
        self.from_email = self.settings.email_sender

    def ensure_configured(self) -> None:
        """Check the selected transport has credentials.

        Raises:
            ConfigurationError: If a credential is missing.
        """
        if self.provider == "smtp":
            if not (self.settings.smtp_user and self.settings.smtp_password):
                raise ConfigurationError("email creds")
        elif self.provider == "resend":
            if not (self.settings.resend_api_key and self.from_email):
                raise ConfigurationError("email creds")
        else:
            raise ConfigurationError(f"email provider '{self.provider}'")

    async def send_reset_code(self, to_email: str, code: str) -> dict[str, Any]:
        """Send a reset code email.

        Args:
            to_email: Recipient email address.
            code: The six-digit code.

        Returns:
            dict: ``{"success": True, "email_id": ...}`` or
            ``{"success": False, "error": ...}``.
        """
        self.ensure_configured()
        text_content, html_content = build_reset_email(code)

        try:
            if self.provider == "smtp":
                await call_upstream(
                    "smtp send", self._send_via_smtp, to_email, text_content, html_content
                )
                email_id = None
            else:
                resend.api_key = self.settings.resend_api_key
                response = await call_upstream(
                    "resend send",
                    resend.Emails.send,
                    {
                        "from": self.from_email,
                        "to": [to_email],
                        "subject": self.settings.email_subject,
                        "html": html_content,
                        "text": text_content,
                    },
                )
                email_id = response.get("id") if isinstance(response, dict) else None

            logger.info("Reset code email sent to %s via %s, id: %s", to_email, self.provider, email_id)
            return {"success": True, "email_id": email_id}

        except UpstreamError as e:
            logger.error("Reset code email to %s timed out: %s", to_email, e.detail)
            return {"success": False, "error": f"{e.message}: {e.detail}"}
        except Exception as e:
            logger.error("Failed to send reset code email to %s: %s", to_email, str(e))
            return {"success": False, "error": str(e)}

    def _send_via_smtp(self, to_email: str, text_content: str, html_content: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = self.settings.email_subject
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg.set_content(text_content)
        msg.add_alternative(html_content, subtype="html")

        timeout = self.settings.upstream_timeout_seconds
        context = ssl.create_default_context()
        if self.settings.smtp_use_ssl:
            with smtplib.SMTP_SSL(
                self.settings.smtp_host, self.settings.smtp_port, context=context, timeout=timeout
            ) as server:
                server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=timeout) as server:
                server.starttls(context=context)
                server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.send_message(msg)
