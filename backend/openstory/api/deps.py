"""FastAPI dependencies - session identity and the services built at startup."""

import uuid

from fastapi import Depends, Request

from openstory.services.chat_service import ChatService
from openstory.services.game_catalog import GameCatalog
from openstory.services.history_service import HistoryService
from openstory.services.llm_service import CompletionProvider

SESSION_KEY = "sid"


def get_session_id(request: Request) -> str:
    """Anonymous session id kept in the signed session cookie."""
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.session[SESSION_KEY] = session_id
    return session_id


def get_game_catalog(request: Request) -> GameCatalog:
    return request.app.state.catalog


def get_history_service(request: Request) -> HistoryService:
    return request.app.state.history


def get_completion_provider(request: Request) -> CompletionProvider:
    return request.app.state.provider


def get_chat_service(
    history: HistoryService = Depends(get_history_service),
    catalog: GameCatalog = Depends(get_game_catalog),
    provider: CompletionProvider = Depends(get_completion_provider),
) -> ChatService:
    return ChatService(history, catalog, provider)
