"""Avatar replacement business logic."""

import logging
from typing import Any

from supabase import Client

from src.api.middleware.error_handler import ClientError, UpstreamError
from src.core.config import Settings, get_settings
from src.core.supabase import get_supabase_client
from src.core.upstream import call_upstream
from src.models.profile import AvatarUpdate, Profile
from src.services.image_service import ImageService

logger = logging.getLogger(__name__)


class AvatarService:
    """Service for swapping a profile's avatar image."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: Client | None = None,
        image_service: ImageService | None = None,
    ) -> None:
        """Initialize avatar service with Supabase client and image host."""
        self.settings = settings or get_settings()
        self.client = client or get_supabase_client()
        self.images = image_service or ImageService(self.settings)

    async def get_profile(self, user_id: str) -> Profile | None:
        """Get a profile by id.

        Args:
            user_id: The profile id.

        Returns:
            Profile | None: The first matching row, or None.

        Raises:
            UpstreamError: If the store query fails.
        """
        query = self.client.table(self.settings.profiles_table).select("*").eq("id", user_id)
        try:
            response = await call_upstream("profile fetch", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError("Failed to fetch profile", detail=str(e)) from e

        rows = response.data if isinstance(response.data, list) else []
        return rows[0] if rows else None

    async def update_avatar(self, user_id: str, new_public_id: str, new_url: str) -> Any:
        """Point a profile at a new avatar, removing the previous image.

        The old image is deleted only when it exists and differs from the
        new one. A failed delete is logged and the update still goes ahead,
        so the old image may be left orphaned on the CDN.

        Args:
            user_id: The profile id.
            new_public_id: Image host identifier of the new avatar.
            new_url: Public URL of the new avatar.

        Returns:
            The updated rows as returned by the store.

        Raises:
            ClientError: If a field is missing.
            UpstreamError: If the profile cannot be read or written.
        """
        user_id = (user_id or "").strip()
        new_public_id = (new_public_id or "").strip()
        new_url = (new_url or "").strip()
        if not user_id or not new_public_id or not new_url:
            raise ClientError("Missing fields. Required: user_id, new_public_id, new_url")

        existing = await self.get_profile(user_id)
        old_public_id = existing.get("avatar_public_id") if existing else None

        if old_public_id and old_public_id != new_public_id:
            try:
                await self.images.delete_image(old_public_id)
            except Exception as e:
                logger.error("Error deleting old avatar %s for %s: %s", old_public_id, user_id, str(e))

        update: AvatarUpdate = {"avatar_url": new_url, "avatar_public_id": new_public_id}
        query = self.client.table(self.settings.profiles_table).update(update).eq("id", user_id)
        try:
            response = await call_upstream("profile update", query.execute)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Profile update failed for %s: %s", user_id, str(e))
            raise UpstreamError("Failed to update profile", detail=str(e)) from e

        logger.info("Avatar updated for %s", user_id)
        return response.data
