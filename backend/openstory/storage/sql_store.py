"""SQL-backed record store (SQLAlchemy async), one row per conversation."""

import asyncio

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from openstory.db.database import Base, create_session_factory
from openstory.errors import StorageError
from openstory.models.chat_log import ChatLogRecord
from openstory.storage.base import Location, RecordStore


class SqlRecordStore(RecordStore):
    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    async def ensure_scope(self, location: Location) -> None:
        """Create the chat_logs table on first use."""
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except SQLAlchemyError as e:
                raise StorageError(f"Could not create chat_logs table: {e}") from e
            self._schema_ready = True

    async def read(self, location: Location) -> str | None:
        await self.ensure_scope(location)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(ChatLogRecord.payload).where(
                        ChatLogRecord.session_id == location.session_id,
                        ChatLogRecord.game_id == location.game_id,
                    )
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Database read failed: {e}") from e

    async def write(self, location: Location, data: str) -> None:
        await self.ensure_scope(location)
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    await db.merge(ChatLogRecord(
                        session_id=location.session_id,
                        game_id=location.game_id,
                        payload=data,
                    ))
        except SQLAlchemyError as e:
            raise StorageError(f"Database write failed: {e}") from e

    async def delete(self, location: Location) -> None:
        await self.ensure_scope(location)
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    await db.execute(
                        delete(ChatLogRecord).where(
                            ChatLogRecord.session_id == location.session_id,
                            ChatLogRecord.game_id == location.game_id,
                        )
                    )
        except SQLAlchemyError as e:
            raise StorageError(f"Database delete failed: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()
