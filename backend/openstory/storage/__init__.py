"""Chat history record stores."""

from openstory.config import Settings
from openstory.storage.base import Location, RecordStore, location_for
from openstory.storage.file_store import FileRecordStore

__all__ = ["Location", "RecordStore", "location_for", "FileRecordStore", "build_record_store"]


def build_record_store(settings: Settings) -> RecordStore:
    """Create the record store selected by ``STORAGE_BACKEND``."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "file":
        return FileRecordStore(settings.USER_DATA_DIR)
    if backend == "redis":
        from openstory.db.redis import get_redis_client
        from openstory.storage.redis_store import RedisRecordStore

        return RedisRecordStore(
            get_redis_client(settings.REDIS_URL), prefix=settings.REDIS_KEY_PREFIX
        )
    if backend == "sql":
        from openstory.db.database import create_engine
        from openstory.storage.sql_store import SqlRecordStore

        return SqlRecordStore(create_engine(settings.DATABASE_URL))
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
