"""Profile model type definitions for database operations."""

from typing import TypedDict


class Profile(TypedDict, total=False):
    """Profile table row representation.

    Only the avatar columns are read or written by this service; any
    other columns the store returns are passed through untouched.
    """

    id: str
    avatar_url: str | None
    avatar_public_id: str | None


class AvatarUpdate(TypedDict):
    """Columns written when an avatar is replaced."""

    avatar_url: str
    avatar_public_id: str
