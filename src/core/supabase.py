"""Service-role Supabase client shared by every collaborator call."""

from functools import lru_cache
from typing import Any

from supabase import Client, create_client
from supabase.lib.client_options import SyncClientOptions
from supabase_auth import SyncMemoryStorage

from src.core.config import get_settings
from src.core.upstream import call_upstream


@lru_cache
def get_supabase_client() -> Client:
    """Build the process-wide service-role client once.

    The service role key bypasses row level security and is what the
    GoTrue admin endpoints require, so this client is only ever used after
    the request has been validated. Sessions are neither persisted nor
    refreshed, which keeps the Authorization header pinned to the key.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_base_url,
        settings.supabase_secret_key,
        options=SyncClientOptions(
            storage=SyncMemoryStorage(),
            auto_refresh_token=False,
            persist_session=False,
            postgrest_client_timeout=settings.upstream_timeout_seconds,
        ),
    )


async def check_database_connection() -> dict[str, Any]:
    """Probe PostgREST with a one-row select on the profiles table.

    Returns:
        dict: ``{"healthy": True}`` or ``{"healthy": False, "error": ...}``.
    """
    try:
        query = get_supabase_client().table(get_settings().profiles_table).select("id").limit(1)
        await call_upstream("database health check", query.execute)
    except Exception as e:
        return {"healthy": False, "error": str(e)}
    return {"healthy": True}
