"""Shared test fixtures - file-backed stores under tmp_path and a stub LLM."""

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from openstory.api.deps import get_completion_provider, get_game_catalog, get_history_service
from openstory.services.chat_service import ChatService
from openstory.services.game_catalog import GameCatalog
from openstory.services.history_service import HistoryService
from openstory.storage.file_store import FileRecordStore

GAMES_YAML = """
- id: fantasy-quest
  name: Fantasy Quest
  description: A quest.
  systemPrompt: You are a wizard.
  thumbnailUrl: /thumbnails/fantasy-quest.png
- id: space-station
  name: Space Station
  description: A station.
  systemPrompt: You are the station AI.
  thumbnailUrl: /thumbnails/space-station.png
"""


class StubProvider:
    """Records every prompt and answers with a canned reply (or raises)."""

    def __init__(self, reply: str = "Greetings, traveler.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[dict]] = []

    async def complete(self, messages: list[dict]) -> str:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def store(tmp_path: Path) -> FileRecordStore:
    return FileRecordStore(tmp_path / "user_data")


@pytest.fixture
def history(store) -> HistoryService:
    return HistoryService(store)


@pytest.fixture
def games_file(tmp_path: Path) -> Path:
    path = tmp_path / "games.yaml"
    path.write_text(GAMES_YAML, encoding="utf-8")
    return path


@pytest.fixture
def catalog(games_file) -> GameCatalog:
    catalog = GameCatalog(games_file)
    catalog.load()
    return catalog


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def chat_service(history, catalog, provider) -> ChatService:
    return ChatService(history, catalog, provider)


@pytest.fixture
async def client(history, catalog, provider):
    """Async HTTP test client with test services injected."""
    from openstory.main import app

    app.dependency_overrides[get_history_service] = lambda: history
    app.dependency_overrides[get_game_catalog] = lambda: catalog
    app.dependency_overrides[get_completion_provider] = lambda: provider
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
