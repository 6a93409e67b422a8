"""Room membership type definitions."""

from typing import TypedDict


class RoomMembership(TypedDict):
    """Row in room_members. Rows are upserted, never deleted."""

    room_id: str
    user_id: str
    is_online: bool
