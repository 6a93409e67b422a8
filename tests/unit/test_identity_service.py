"""Unit tests for IdentityService and the user list normalizer."""

import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.api.middleware.error_handler import UpstreamError
from src.services.identity_service import IdentityService, normalize_user_list


@pytest.fixture
def mock_supabase() -> MagicMock:
    """Create a mock Supabase client."""
    return MagicMock()


@pytest.fixture
def identity(mock_supabase: MagicMock) -> IdentityService:
    """Create IdentityService with mocked client."""
    return IdentityService(client=mock_supabase)


class TestNormalizeUserList:
    """Tests for normalize_user_list."""

    def test_bare_list(self) -> None:
        """Test that a bare list of dicts is accepted."""
        users = normalize_user_list([{"id": "u1", "email": "a@b.com"}])

        assert users == [{"id": "u1", "email": "a@b.com"}]

    def test_wrapped_under_users(self) -> None:
        """Test that a {users: [...]} wrapper is unwrapped."""
        users = normalize_user_list({"users": [{"id": "u1", "email": "a@b.com"}], "aud": "x"})

        assert [u["id"] for u in users] == ["u1"]

    def test_wrapped_under_data(self) -> None:
        """Test that a {data: [...]} wrapper is unwrapped."""
        users = normalize_user_list({"data": [{"id": "u2", "email": "c@d.com"}]})

        assert [u["id"] for u in users] == ["u2"]

    def test_object_with_users_attribute(self) -> None:
        """Test that a response object exposing .users is unwrapped."""
        raw = SimpleNamespace(users=[SimpleNamespace(id="u3", email="e@f.com")])

        users = normalize_user_list(raw)

        assert users == [{"id": "u3", "email": "e@f.com"}]

    def test_unknown_shape_is_empty(self) -> None:
        """Test that an unrecognized payload normalizes to no users."""
        assert normalize_user_list({"message": "nope"}) == []
        assert normalize_user_list(None) == []

    def test_records_without_id_are_dropped_and_order_kept(self) -> None:
        """Test that order is preserved and id-less records are skipped."""
        users = normalize_user_list(
            [{"email": "x@y.com"}, {"id": "b", "email": "b@x.com"}, {"id": "a", "email": "a@x.com"}]
        )

        assert [u["id"] for u in users] == ["b", "a"]


class TestFindByEmail:
    """Tests for find_by_email method."""

    @pytest.mark.asyncio
    async def test_returns_first_matching_user(
        self, identity: IdentityService, mock_supabase: MagicMock
    ) -> None:
        """Test that the first case-insensitive match is returned."""
        mock_supabase.auth.admin.list_users.return_value = [
            SimpleNamespace(id="other", email="other@b.com"),
            SimpleNamespace(id="first", email="A@B.com"),
            SimpleNamespace(id="second", email="a@b.com"),
        ]

        user = await identity.find_by_email("a@b.com")

        assert user == {"id": "first", "email": "A@B.com"}

    @pytest.mark.asyncio
    async def test_returns_none_when_no_match(
        self, identity: IdentityService, mock_supabase: MagicMock
    ) -> None:
        """Test that an unknown email yields None."""
        mock_supabase.auth.admin.list_users.return_value = [
            SimpleNamespace(id="other", email="other@b.com"),
        ]

        assert await identity.find_by_email("a@b.com") is None
        mock_supabase.auth.admin.list_users.assert_called_once()

    @pytest.mark.asyncio
    async def test_pages_until_short_page(self, mock_supabase: MagicMock, test_settings) -> None:
        """Test that a full page triggers a request for the next one."""
        settings = test_settings.model_copy(update={"identity_page_size": 1})
        identity = IdentityService(settings=settings, client=mock_supabase)
        mock_supabase.auth.admin.list_users.side_effect = [
            [SimpleNamespace(id="u1", email="x@b.com")],
            [SimpleNamespace(id="u2", email="a@b.com")],
        ]

        user = await identity.find_by_email("a@b.com")

        assert user is not None
        assert user["id"] == "u2"
        assert mock_supabase.auth.admin.list_users.call_count == 2
        second_call = mock_supabase.auth.admin.list_users.call_args_list[1]
        assert second_call.kwargs == {"page": 2, "per_page": 1}

    @pytest.mark.asyncio
    async def test_lookup_failure_raises_upstream_error(
        self, identity: IdentityService, mock_supabase: MagicMock
    ) -> None:
        """Test that an admin API error is surfaced."""
        mock_supabase.auth.admin.list_users.side_effect = Exception("User not allowed")

        with pytest.raises(UpstreamError) as exc_info:
            await identity.find_by_email("a@b.com")

        assert exc_info.value.message == "Failed to fetch user"
        assert exc_info.value.detail == "User not allowed"

    @pytest.mark.asyncio
    async def test_whole_scan_is_bounded_by_one_deadline(
        self, mock_supabase: MagicMock, test_settings
    ) -> None:
        """Test that many slow full pages cannot stretch past the lookup deadline."""
        settings = test_settings.model_copy(
            update={"identity_page_size": 1, "identity_max_pages": 50, "identity_lookup_timeout_seconds": 0.2}
        )
        identity = IdentityService(settings=settings, client=mock_supabase)

        def slow_full_page(page: int, per_page: int) -> list:
            time.sleep(0.05)
            return [SimpleNamespace(id=f"u{page}", email=f"user{page}@b.com")]

        mock_supabase.auth.admin.list_users.side_effect = slow_full_page

        started = time.perf_counter()
        with pytest.raises(UpstreamError) as exc_info:
            await identity.find_by_email("a@b.com")

        assert time.perf_counter() - started < 1.0
        assert exc_info.value.message == "Failed to fetch user"
        assert "0.2 seconds" in exc_info.value.detail
        assert mock_supabase.auth.admin.list_users.call_count < 50


class TestSetPassword:
    """Tests for set_password method."""

    @pytest.mark.asyncio
    async def test_updates_password_by_id(
        self, identity: IdentityService, mock_supabase: MagicMock
    ) -> None:
        """Test that the admin API is called once with the new password."""
        await identity.set_password("user-1", "NewPassword123!")

        mock_supabase.auth.admin.update_user_by_id.assert_called_once_with(
            "user-1", {"password": "NewPassword123!"}
        )

    @pytest.mark.asyncio
    async def test_update_failure_raises_upstream_error(
        self, identity: IdentityService, mock_supabase: MagicMock
    ) -> None:
        """Test that a rejected update is surfaced as a 500."""
        mock_supabase.auth.admin.update_user_by_id.side_effect = Exception("Password should be at least 6 characters")

        with pytest.raises(UpstreamError) as exc_info:
            await identity.set_password("user-1", "x")

        assert exc_info.value.status_code == 500
        assert "at least 6" in exc_info.value.detail
