"""Room presence API routes."""

from fastapi import APIRouter

from src.schemas.common import SuccessResponse
from src.schemas.room import RoomListResponse, RoomMembershipRequest
from src.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get(
    "",
    response_model=RoomListResponse,
    summary="List rooms",
    description="Rooms with their online member counts, busiest first.",
)
async def list_rooms() -> RoomListResponse:
    """List rooms with online member counts."""
    service = RoomService()
    return RoomListResponse(rooms=await service.list_rooms())


@router.post("/join", response_model=SuccessResponse, response_model_exclude_none=True, summary="Join room")
async def join_room(data: RoomMembershipRequest) -> SuccessResponse:
    """Mark the user online in the room."""
    await RoomService().join(data.room_id, data.user_id)
    return SuccessResponse()


@router.post("/leave", response_model=SuccessResponse, response_model_exclude_none=True, summary="Leave room")
async def leave_room(data: RoomMembershipRequest) -> SuccessResponse:
    """Mark the user offline in the room."""
    await RoomService().leave(data.room_id, data.user_id)
    return SuccessResponse()
