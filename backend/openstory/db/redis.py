"""Redis async client backing ``STORAGE_BACKEND=redis``.

Chat logs are stored as one JSON string per (session, game) key by
``openstory.storage.redis_store.RedisRecordStore``; this module owns the
shared connection and closes it on app shutdown.
"""

import redis.asyncio as redis

from openstory.config import settings

redis_client: redis.Redis | None = None


def get_redis_client(url: str | None = None) -> redis.Redis:
    """Shared client for chat history keys, created on first use."""
    global redis_client
    if redis_client is None:
        redis_client = redis.from_url(url or settings.REDIS_URL, decode_responses=True)
    return redis_client


async def close_redis() -> None:
    """Close the history store connection if it was opened."""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
