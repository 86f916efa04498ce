"""Redis-backed record store: one string key per conversation."""

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from openstory.errors import StorageError
from openstory.storage.base import Location, RecordStore


class RedisRecordStore(RecordStore):
    def __init__(self, redis: aioredis.Redis, prefix: str = "openstory"):
        self.redis = redis
        self.prefix = prefix

    def _record_key(self, location: Location) -> str:
        return f"{self.prefix}:chat:{location.key}"

    async def ensure_scope(self, location: Location) -> None:
        # Keys need no containing structure
        return None

    async def read(self, location: Location) -> str | None:
        try:
            raw = await self.redis.get(self._record_key(location))
        except RedisError as e:
            raise StorageError(f"Redis read failed: {e}") from e
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return raw

    async def write(self, location: Location, data: str) -> None:
        try:
            await self.redis.set(self._record_key(location), data)
        except RedisError as e:
            raise StorageError(f"Redis write failed: {e}") from e

    async def delete(self, location: Location) -> None:
        try:
            await self.redis.delete(self._record_key(location))
        except RedisError as e:
            raise StorageError(f"Redis delete failed: {e}") from e
