"""Unit tests for bounded collaborator calls."""

import time

import pytest

from src.api.middleware.error_handler import UpstreamError
from src.core.upstream import call_upstream


class TestCallUpstream:
    """Tests for call_upstream."""

    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        """Test that arguments are forwarded and the result returned."""
        result = await call_upstream("add", lambda a, b=0: a + b, 2, b=3)

        assert result == 5

    @pytest.mark.asyncio
    async def test_propagates_collaborator_exception(self) -> None:
        """Test that errors from the call are not swallowed."""

        def fail() -> None:
            raise ValueError("bad request")

        with pytest.raises(ValueError):
            await call_upstream("fail", fail)

    @pytest.mark.asyncio
    async def test_timeout_raises_upstream_error(self) -> None:
        """Test that a slow call is cut off."""
        with pytest.raises(UpstreamError) as exc_info:
            await call_upstream("slow call", time.sleep, 0.5, timeout=0.05)

        assert exc_info.value.message == "slow call timed out"
        assert exc_info.value.status_code == 500
