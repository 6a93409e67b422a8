"""Room presence business logic."""

import logging
from collections import Counter

from supabase import Client

from src.api.middleware.error_handler import ClientError, UpstreamError
from src.core.config import Settings, get_settings
from src.core.supabase import get_supabase_client
from src.core.upstream import call_upstream
from src.models.room import RoomMembership
from src.schemas.room import RoomSummary

logger = logging.getLogger(__name__)


class RoomService:
    """Service for per-room online presence.

    Presence is a flag on an upserted row; rows are never deleted.
    """

    def __init__(self, settings: Settings | None = None, client: Client | None = None) -> None:
        """Initialize room service with Supabase client."""
        self.settings = settings or get_settings()
        self.client = client or get_supabase_client()

    async def join(self, room_id: str, user_id: str) -> None:
        """Mark a user online in a room."""
        await self._set_presence(room_id, user_id, True)

    async def leave(self, room_id: str, user_id: str) -> None:
        """Mark a user offline in a room."""
        await self._set_presence(room_id, user_id, False)

    async def _set_presence(self, room_id: str, user_id: str, is_online: bool) -> None:
        room_id = (room_id or "").strip()
        user_id = (user_id or "").strip()
        if not room_id or not user_id:
            raise ClientError("Missing room_id or user_id")

        query = self.client.rpc(
            self.settings.room_upsert_rpc,
            {"p_room_id": room_id, "p_user_id": user_id, "p_is_online": is_online},
        )
        try:
            await call_upstream("room presence upsert", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Room presence upsert failed for %s in %s: %s", user_id, room_id, str(e))
            raise UpstreamError("Failed to update room membership", detail=str(e)) from e

        logger.info("User %s is_online=%s in room %s", user_id, is_online, room_id)

    async def list_rooms(self) -> list[RoomSummary]:
        """Count online members per room.

        Online rows are read in pages of ``room_page_size`` until a short
        page comes back, since PostgREST truncates any single response at
        its max-rows setting.

        Returns:
            list[RoomSummary]: Rooms with at least one online member, highest
            count first. Equal counts are ordered by room_id.

        Raises:
            UpstreamError: If a store query fails.
        """
        counts: Counter[str] = Counter()
        page_size = self.settings.room_page_size
        start = 0
        while True:
            rows = await self._fetch_online_page(start, start + page_size - 1)
            counts.update(str(row["room_id"]) for row in rows if row.get("room_id"))
            if len(rows) < page_size:
                break
            start += page_size

        return [
            RoomSummary(room_id=room_id, member_count=count)
            for room_id, count in counts.most_common()
        ]

    async def _fetch_online_page(self, start: int, end: int) -> list[RoomMembership]:
        # Stable ordering so consecutive ranges neither skip nor repeat rows.
        query = (
            self.client.table(self.settings.room_members_table)
            .select("room_id")
            .eq("is_online", True)
            .order("room_id")
            .order("user_id")
            .range(start, end)
        )
        try:
            response = await call_upstream("room list", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Room list failed at rows %d-%d: %s", start, end, str(e))
            raise UpstreamError("Failed to list rooms", detail=str(e)) from e

        return response.data or []
