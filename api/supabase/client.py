"""
Supabase clients for kitchenCOGS.

One factory builds both keys' clients from Settings. Kitchen data routes
filter every query by user_id themselves, so they prefer the service role
key when it is set.
"""

import logging
from functools import lru_cache

from supabase import Client, create_client

from api.config import get_settings

logger = logging.getLogger(__name__)


class SupabaseNotConfigured(RuntimeError):
    """The URL or the key the caller needs is missing."""


@lru_cache(maxsize=2)
def supabase_client(service_role: bool = False) -> Client:
    """
    Cached client for the anon key, or for the service role key.

    The service role client bypasses row level security. It backs the
    admin panel and the user_id-scoped repository, never anything handed
    to a browser.
    """
    settings = get_settings()
    key = settings.supabase_service_role_key if service_role else settings.supabase_anon_key
    key_name = "SUPABASE_SERVICE_ROLE_KEY" if service_role else "SUPABASE_ANON_KEY"

    if not settings.supabase_url or not key:
        raise SupabaseNotConfigured(f"Set SUPABASE_URL and {key_name}.")

    logger.info(f"Supabase client ready ({'service role' if service_role else 'anon'})")
    return create_client(settings.supabase_url, key)


def kitchen_data_client() -> Client:
    """Client for per-user kitchen data: service role when available, anon otherwise."""
    return supabase_client(service_role=bool(get_settings().supabase_service_role_key))
