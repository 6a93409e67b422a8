"""Room presence schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RoomMembershipRequest(BaseModel):
    """Body for POST /rooms/join and /rooms/leave."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    room_id: str | None = Field(default=None, description="Room identifier")
    user_id: str | None = Field(default=None, description="User identifier")


class RoomSummary(BaseModel):
    """Online member count for one room."""

    room_id: str = Field(description="Room identifier")
    member_count: int = Field(description="Members currently online")


class RoomListResponse(BaseModel):
    """Rooms with at least one online member, busiest first."""

    success: bool = Field(default=True)
    rooms: list[RoomSummary] = Field(default_factory=list)
