"""Cloudinary SDK configuration."""

import logging

import cloudinary

from src.core.config import get_settings

logger = logging.getLogger(__name__)


def configure_cloudinary() -> None:
    """Configure the Cloudinary SDK with credentials from settings.

    This should be called once at application startup. If credentials
    are missing, image operations fail with a misconfiguration error.
    """
    settings = get_settings()
    if settings.cloudinary_configured:
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )
    else:
        logger.warning("Cloudinary credentials not configured. Image deletion will not work.")
