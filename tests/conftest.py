"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("EMAIL_FROM_ADDRESS", "Reset <noreply@example.com>")
os.environ.setdefault("AVATAR_API_KEY", "test-avatar-key")
os.environ.setdefault("DELETE_TOKEN", "test-delete-token")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-cloudinary-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-cloudinary-secret")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """Provide a mocked Supabase client with empty default responses."""
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )
    return mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client whose services all share one mocked Supabase client.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    targets = [
        "src.core.supabase.get_supabase_client",
        "src.services.reset_code_store.get_supabase_client",
        "src.services.identity_service.get_supabase_client",
        "src.services.avatar_service.get_supabase_client",
        "src.services.room_service.get_supabase_client",
    ]
    patchers = [patch(target, return_value=mock_supabase_client) for target in targets]
    for patcher in patchers:
        patcher.start()

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        for patcher in patchers:
            patcher.stop()
