"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client for table access and auth
- Sync Upstash Redis client for device-local cart slots
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis import Redis


# A storefront is a public client: it talks to the backend with the anon key
# and relies on row level security for per-user access.
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_async_supabase_client: Optional[AsyncClient] = None
_sync_redis_client: Optional[Redis] = None


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client (singleton).
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_ANON_KEY)

    return _async_supabase_client


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Local cart writes must complete before the mutating call returns,
    so the cart slot uses the blocking client.
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _sync_redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _sync_redis_client


class RedisKeys:
    """Redis key prefixes."""

    GUEST_CART = "cart:guest:"  # cart:guest:{device_id}

    @staticmethod
    def guest_cart_key(device_id: str) -> str:
        return f"{RedisKeys.GUEST_CART}{device_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    GUEST_CART = 2592000  # 30 days
