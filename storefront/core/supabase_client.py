# storefront/core/supabase_client.py
from functools import lru_cache

from supabase import Client, create_client

from storefront.core.config import get_settings

settings = get_settings()


@lru_cache
def service_client() -> Client:
    """
    Service-role Supabase client, built on first use.

    The storefront only talks to Supabase for product media; auth is
    handled by verifying the access token locally. The key bypasses RLS,
    so it stays on the server.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_ROLE_KEY is required for media uploads")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def storage_bucket(name: str):
    """Handle on one Storage bucket (product images or product videos)."""
    return service_client().storage.from_(name)
