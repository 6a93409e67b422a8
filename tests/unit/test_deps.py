"""Unit tests for FastAPI dependency functions."""

from unittest.mock import MagicMock, patch

import pytest

from src.api.deps import check_delete_token, require_avatar_key
from src.api.middleware.error_handler import ConfigurationError, ForbiddenError


def _settings(**values: str) -> MagicMock:
    settings = MagicMock()
    settings.avatar_api_key = values.get("avatar_api_key", "secret")
    settings.delete_token = values.get("delete_token", "delete-me")
    return settings


class TestRequireAvatarKey:
    """Tests for require_avatar_key dependency."""

    @pytest.mark.asyncio
    @patch("src.api.deps.get_settings")
    @pytest.mark.parametrize(
        "headers",
        [
            {"apikey": "secret"},
            {"x_apikey": "secret"},
            {"authorization": "Bearer secret"},
            {"authorization": "secret"},
        ],
    )
    async def test_accepts_secret_in_any_header(self, mock_settings: MagicMock, headers: dict) -> None:
        """Test that each supported header form is accepted."""
        mock_settings.return_value = _settings()

        assert await require_avatar_key(**headers) is None

    @pytest.mark.asyncio
    @patch("src.api.deps.get_settings")
    @pytest.mark.parametrize("headers", [{}, {"apikey": "wrong"}, {"authorization": "Bearer wrong"}])
    async def test_rejects_missing_or_wrong_secret(self, mock_settings: MagicMock, headers: dict) -> None:
        """Test that a bad secret is a 403."""
        mock_settings.return_value = _settings()

        with pytest.raises(ForbiddenError):
            await require_avatar_key(**headers)

    @pytest.mark.asyncio
    @patch("src.api.deps.get_settings")
    async def test_unconfigured_secret_is_server_error(self, mock_settings: MagicMock) -> None:
        """Test that a server without a secret refuses with 500."""
        mock_settings.return_value = _settings(avatar_api_key="")

        with pytest.raises(ConfigurationError) as exc_info:
            await require_avatar_key(apikey="anything")

        assert exc_info.value.status_code == 500


class TestCheckDeleteToken:
    """Tests for check_delete_token."""

    @patch("src.api.deps.get_settings")
    def test_accepts_matching_token(self, mock_settings: MagicMock) -> None:
        """Test that the configured token passes."""
        mock_settings.return_value = _settings()

        check_delete_token("delete-me")

    @patch("src.api.deps.get_settings")
    @pytest.mark.parametrize("token", [None, "", "nope"])
    def test_rejects_bad_token(self, mock_settings: MagicMock, token) -> None:
        """Test that a missing or wrong token is a 403."""
        mock_settings.return_value = _settings()

        with pytest.raises(ForbiddenError):
            check_delete_token(token)

    @patch("src.api.deps.get_settings")
    def test_unconfigured_token(self, mock_settings: MagicMock) -> None:
        """Test that a server without a token refuses with 500."""
        mock_settings.return_value = _settings(delete_token="")

        with pytest.raises(ConfigurationError):
            check_delete_token("delete-me")
