"""Supabase client wrapper with async context manager support."""

from typing import Optional
from supabase import create_client, acreate_client, Client, AsyncClient
from supabase.client import ClientOptions
from idrhub.utils.config import AppConfig
from idrhub.utils.errors import ConfigError
import logging

logger = logging.getLogger(__name__)

# Global client instances (singleton pattern)
_client: Optional[Client] = None
_realtime_client: Optional[AsyncClient] = None


def _credentials() -> tuple[str, str]:
    url = AppConfig.SUPABASE_URL
    key = AppConfig.SUPABASE_ANON_KEY
    if not url or not key:
        raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return url, key


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton.

    Uses the anon key so that row-level security applies to every query.
    """
    global _client

    if _client is None:
        url, key = _credentials()
        options = ClientOptions(
            auto_refresh_token=True,
            persist_session=True,
            headers={"X-Client-Info": "idrhub-client"},
        )
        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def get_realtime_client() -> AsyncClient:
    """Get or create the async client used for realtime channels.

    supabase-py only delivers postgres_changes on the async client. It holds
    no session of its own; ChangeFeed hands it the current access token.
    """
    global _realtime_client

    if _realtime_client is None:
        url, key = _credentials()
        _realtime_client = await acreate_client(url, key)
        logger.info("Supabase realtime client initialized", extra={"url": url})

    return _realtime_client


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


def get_public_url(bucket: str, path: str) -> str:
    """Resolve a storage object key to its public URL."""
    return get_supabase_client().storage.from_(bucket).get_public_url(path)


def current_access_token() -> str:
    """JWT for realtime: the signed-in session's access token, else the anon key."""
    session = get_supabase_client().auth.get_session()
    if session is not None and session.access_token:
        return session.access_token
    return AppConfig.SUPABASE_ANON_KEY
