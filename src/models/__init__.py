"""Database model type definitions."""

from src.models.identity import IdentityUser
from src.models.password_reset import ResetRequest
from src.models.profile import AvatarUpdate, Profile
from src.models.room import RoomMembership

__all__ = [
    "AvatarUpdate",
    "IdentityUser",
    "Profile",
    "ResetRequest",
    "RoomMembership",
]
