"""History service - durable read/modify/write of per-game chat logs.

``append`` is the only way messages get added. It runs load -> push -> save
under a per-(session, game) lock so concurrent appends on one key can't drop
each other's messages, while different keys proceed independently.
"""

import logging
from collections.abc import Callable

from pydantic import ValidationError as PydanticValidationError

from openstory.errors import ValidationError
from openstory.schemas.chat import ConversationLog, Message, now_ms
from openstory.storage.base import RecordStore
from openstory.storage.locks import KeyedLock

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(self, store: RecordStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self._locks = KeyedLock()

    def _new_log(self, session_id: str, game_id: str) -> ConversationLog:
        now = self.clock()
        return ConversationLog(
            session_id=session_id,
            game_id=game_id,
            messages=[],
            created_at=now,
            updated_at=now,
        )

    async def load(self, session_id: str, game_id: str) -> ConversationLog:
        """Return the stored log, or a fresh empty one if absent or corrupt."""
        location = self.store.location_for(session_id, game_id)
        raw = await self.store.read(location)
        if raw is None:
            return self._new_log(session_id, game_id)

        try:
            log = ConversationLog.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(
                "Discarding unreadable chat log for %s: %s",
                location.key, e.errors(include_url=False)[:3],
            )
            return self._new_log(session_id, game_id)

        if log.session_id != session_id or log.game_id != game_id:
            logger.warning(
                "Discarding chat log for %s stored under %s/%s",
                location.key, log.session_id, log.game_id,
            )
            return self._new_log(session_id, game_id)
        return log

    async def save(self, session_id: str, game_id: str, log: ConversationLog) -> None:
        """Stamp ``updated_at`` and atomically write the whole record."""
        if log.session_id != session_id or log.game_id != game_id:
            raise ValidationError(
                f"Log for {log.session_id}/{log.game_id} can't be saved "
                f"under {session_id}/{game_id}"
            )
        location = self.store.location_for(session_id, game_id)
        log.updated_at = max(self.clock(), log.created_at)
        await self.store.ensure_scope(location)
        await self.store.write(location, log.model_dump_json(by_alias=True, indent=2))

    async def append(self, session_id: str, game_id: str, message: Message) -> ConversationLog:
        """Add one message to the end of the log and persist it."""
        location = self.store.location_for(session_id, game_id)
        async with self._locks.hold(location.key):
            log = await self.load(session_id, game_id)
            log.messages.append(message)
            await self.save(session_id, game_id, log)
        logger.debug(
            "Appended %s message to %s (%d total)",
            message.role, location.key, len(log.messages),
        )
        return log

    async def delete(self, session_id: str, game_id: str) -> None:
        """Remove the whole log. Deleting a missing log is a no-op."""
        location = self.store.location_for(session_id, game_id)
        async with self._locks.hold(location.key):
            await self.store.delete(location)
        logger.info("Deleted chat log for %s", location.key)
