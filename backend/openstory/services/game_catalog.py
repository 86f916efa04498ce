"""Game catalog - loads game definitions from a YAML (or JSON) file.

The catalog is built once at startup and handed to whoever needs it; nothing
here is module-level state.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from openstory.schemas.game import (
    CatalogLoadFailed,
    CatalogLoaded,
    CatalogLoadResult,
    GameDescriptor,
)

logger = logging.getLogger(__name__)

_games_adapter = TypeAdapter(list[GameDescriptor])


def parse_games(raw: Any) -> CatalogLoadResult:
    """Validate raw catalog data. Never raises; failures come back tagged."""
    if not isinstance(raw, list):
        return CatalogLoadFailed(error="Games file must contain a list of games")

    try:
        games = _games_adapter.validate_python(raw)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        where = ".".join(str(p) for p in first["loc"])
        return CatalogLoadFailed(error=f"Invalid game configuration at {where}: {first['msg']}")

    seen: set[str] = set()
    for game in games:
        if game.id in seen:
            return CatalogLoadFailed(error=f"Duplicate game id: {game.id}")
        seen.add(game.id)

    return CatalogLoaded(games=games)


class GameCatalog:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._games: dict[str, GameDescriptor] = {}
        self._loaded = False

    def load(self) -> CatalogLoadResult:
        """Load the catalog file. On failure the previous games are kept."""
        if not self.path.exists():
            return CatalogLoadFailed(error=f"Games file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            return CatalogLoadFailed(error=f"Could not read {self.path}: {e}")

        result = parse_games(raw)
        if isinstance(result, CatalogLoaded):
            self._games = {game.id: game for game in result.games}
            self._loaded = True
            logger.info("Loaded %d games from %s", len(self._games), self.path)
        else:
            logger.error("Failed to load games from %s: %s", self.path, result.error)
        return result

    def reload(self) -> CatalogLoadResult:
        """Re-read the catalog file, e.g. after it was edited."""
        return self.load()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def list_games(self) -> list[GameDescriptor]:
        return list(self._games.values())

    def get_game_by_id(self, game_id: str) -> GameDescriptor | None:
        return self._games.get(game_id)
