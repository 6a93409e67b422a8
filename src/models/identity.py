"""Auth user type definitions."""

from typing import TypedDict


class IdentityUser(TypedDict):
    """Normalized auth user record returned by the identity lookup."""

    id: str
    email: str | None
