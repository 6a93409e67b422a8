"""Image host operations backed by Cloudinary."""

import logging
from typing import Any

import cloudinary.uploader

from src.api.middleware.error_handler import ConfigurationError, UpstreamError
from src.core.config import Settings, get_settings
from src.core.upstream import call_upstream

logger = logging.getLogger(__name__)


class ImageService:
    """Service for removing images from the CDN."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize image service from settings."""
        self.settings = settings or get_settings()

    async def delete_image(self, public_id: str) -> dict[str, Any]:
        """Delete an image and invalidate cached copies.

        Args:
            public_id: Cloudinary public id, e.g. ``avatars/abc123``.

        Returns:
            dict: Cloudinary's result, e.g. ``{"result": "ok"}`` or
            ``{"result": "not found"}``.

        Raises:
            ConfigurationError: If Cloudinary credentials are missing.
            UpstreamError: If the destroy call fails.
        """
        if not self.settings.cloudinary_configured:
            raise ConfigurationError("cloudinary credentials")

        try:
            result = await call_upstream(
                "image delete",
                cloudinary.uploader.destroy,
                public_id,
                invalidate=True,
                resource_type="image",
            )
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Cloudinary destroy failed for %s: %s", public_id, str(e))
            raise UpstreamError("Failed to delete image", detail=str(e)) from e

        logger.info("Cloudinary destroy %s: %s", public_id, result)
        return result if isinstance(result, dict) else {"result": result}
