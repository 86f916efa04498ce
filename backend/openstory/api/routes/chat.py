"""Chat endpoints - read, extend and reset one game's conversation."""

from fastapi import APIRouter, Depends, Response

from openstory.api.deps import (
    get_chat_service,
    get_game_catalog,
    get_history_service,
    get_session_id,
)
from openstory.errors import NotFoundError
from openstory.schemas.chat import ChatHistoryResponse, ChatReply, SendMessageRequest
from openstory.services.chat_service import ChatService
from openstory.services.game_catalog import GameCatalog
from openstory.services.history_service import HistoryService

router = APIRouter()


def _require_game(game_id: str, catalog: GameCatalog) -> None:
    if catalog.get_game_by_id(game_id) is None:
        raise NotFoundError(f"No game exists with ID: {game_id}")


@router.get("/{game_id}", response_model=ChatHistoryResponse)
async def get_chat_history(
    game_id: str,
    session_id: str = Depends(get_session_id),
    catalog: GameCatalog = Depends(get_game_catalog),
    history: HistoryService = Depends(get_history_service),
):
    """Get the full conversation for this session and game (empty if new)."""
    _require_game(game_id, catalog)
    log = await history.load(session_id, game_id)
    return ChatHistoryResponse(chat_history=log)


@router.post("/{game_id}", response_model=ChatReply)
async def send_message(
    game_id: str,
    req: SendMessageRequest,
    session_id: str = Depends(get_session_id),
    chat: ChatService = Depends(get_chat_service),
):
    """Send a message and get the assistant's reply; both are stored."""
    return await chat.respond(session_id, game_id, req.message)


@router.delete("/{game_id}", status_code=204)
async def reset_chat(
    game_id: str,
    session_id: str = Depends(get_session_id),
    catalog: GameCatalog = Depends(get_game_catalog),
    history: HistoryService = Depends(get_history_service),
):
    """Delete this session's conversation for the game."""
    _require_game(game_id, catalog)
    await history.delete(session_id, game_id)
    return Response(status_code=204)
