"""Game endpoints - list the playable games."""

from fastapi import APIRouter, Depends

from openstory.api.deps import get_game_catalog
from openstory.schemas.game import GamesResponse
from openstory.services.game_catalog import GameCatalog

router = APIRouter()


@router.get("", response_model=GamesResponse)
async def list_games(catalog: GameCatalog = Depends(get_game_catalog)):
    """Return all available games for the home page tiles."""
    return GamesResponse(games=catalog.list_games())
