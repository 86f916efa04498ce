"""File-backed record store.

Layout: ``<root>/<session>/<game>/chat.json``, one pretty-printed JSON file
per conversation.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from openstory.errors import StorageError
from openstory.storage.base import Location, RecordStore

logger = logging.getLogger(__name__)

CHAT_FILE_NAME = "chat.json"

# mkstemp creates files as 0600; chat files get the usual umask-based mode
_UMASK = os.umask(0)
os.umask(_UMASK)
FILE_MODE = 0o666 & ~_UMASK


class FileRecordStore(RecordStore):
    def __init__(self, root: Path):
        self.root = Path(root)

    def scope_dir(self, location: Location) -> Path:
        return self.root / location.session_segment / location.game_segment

    def path_for(self, location: Location) -> Path:
        return self.scope_dir(location) / CHAT_FILE_NAME

    async def ensure_scope(self, location: Location) -> None:
        try:
            # exist_ok makes concurrent creation of the same tree a no-op
            await asyncio.to_thread(
                self.scope_dir(location).mkdir, parents=True, exist_ok=True
            )
        except OSError as e:
            raise StorageError(f"Could not create {self.scope_dir(location)}: {e}") from e

    async def read(self, location: Location) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(location))

    async def write(self, location: Location, data: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(location), data)

    async def delete(self, location: Location) -> None:
        path = self.path_for(location)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {path}: {e}") from e

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            # Undecodable bytes are corrupt data, not an I/O failure
            logger.warning("Chat record %s is not valid UTF-8", path)
            return ""
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    @staticmethod
    def _write(path: Path, data: str) -> None:
        """Write to a temp file in the same directory, then swap it in."""
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temp file %s", tmp_name)
