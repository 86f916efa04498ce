"""Key-addressed record store contract.

A record is one serialized ConversationLog. Stores only deal in raw text;
parsing and validation belong to the history service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import quote


def _encode(component: str) -> str:
    # quote() escapes "%" itself, so the encoding stays injective; dots are
    # escaped too so "." and ".." can't be used as path segments.
    return quote(component, safe="").replace(".", "%2E")


@dataclass(frozen=True)
class Location:
    """Where the record for one (session_id, game_id) pair lives."""
    session_id: str
    game_id: str

    @property
    def session_segment(self) -> str:
        return _encode(self.session_id)

    @property
    def game_segment(self) -> str:
        return _encode(self.game_id)

    @property
    def key(self) -> str:
        return f"{self.session_segment}:{self.game_segment}"


def location_for(session_id: str, game_id: str) -> Location:
    """Resolve a (session_id, game_id) pair to its storage location."""
    return Location(session_id=session_id, game_id=game_id)


class RecordStore(ABC):
    """Async storage for one text record per Location."""

    def location_for(self, session_id: str, game_id: str) -> Location:
        return location_for(session_id, game_id)

    @abstractmethod
    async def ensure_scope(self, location: Location) -> None:
        """Create whatever the location needs. Idempotent and race-safe."""

    @abstractmethod
    async def read(self, location: Location) -> str | None:
        """Return the stored record, or None if there is none."""

    @abstractmethod
    async def write(self, location: Location, data: str) -> None:
        """Replace the record atomically; readers see old or new, never partial."""

    @abstractmethod
    async def delete(self, location: Location) -> None:
        """Remove the record. A missing record is not an error."""

    async def close(self) -> None:
        """Release backend connections, if any."""
