"""Reset code model type definitions."""

from typing import TypedDict


class ResetRequest(TypedDict):
    """Row stored in the password_resets table.

    Expiry and consumption are decided by the verify_reset_code
    procedure, never by this service.
    """

    email: str
    code: str
    created_at: str
