"""
Supabase client.

Cached connection used by the Supabase corpus store.
"""

from functools import lru_cache

import structlog
from supabase import Client, create_client

from propmatch.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Thin wrapper around the Supabase client."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        """Direct access to the Supabase client."""
        return self._client

    def table(self, name: str):
        """Access to a specific table."""
        return self._client.table(name)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Returns the Supabase client (cached).

    Raises:
        ValueError: If the credentials are not configured
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_KEY are required. "
            "Set the environment variables."
        )

    # Prefer the service key for writes when available
    key = settings.supabase_service_key or settings.supabase_key

    client = create_client(settings.supabase_url, key)
    logger.info("Supabase client initialized", url=settings.supabase_url)

    return SupabaseClient(client)
