"""Chat service - turns one player utterance into a stored exchange.

Flow per request:
    validate -> resolve game -> load history -> persist user message
    -> call provider -> persist assistant message

A provider failure leaves the user message in history; nothing is rolled
back and nothing is retried here.
"""

import logging

from openstory.errors import NotFoundError, ProviderError, ValidationError
from openstory.schemas.chat import ChatReply, Message
from openstory.services.game_catalog import GameCatalog
from openstory.services.history_service import HistoryService
from openstory.services.llm_service import CompletionProvider

logger = logging.getLogger(__name__)


def build_prompt(
    system_instruction: str, history: list[Message], user_message: Message
) -> list[dict]:
    """System instruction first, stored history in order, new message last.

    System entries already in history are skipped so the prompt always has
    exactly one. Nothing is truncated.
    """
    messages = [{"role": "system", "content": system_instruction}]
    messages.extend(
        {"role": msg.role, "content": msg.content}
        for msg in history
        if msg.role != "system"
    )
    messages.append({"role": user_message.role, "content": user_message.content})
    return messages


class ChatService:
    def __init__(
        self,
        history: HistoryService,
        catalog: GameCatalog,
        provider: CompletionProvider,
    ):
        self.history = history
        self.catalog = catalog
        self.provider = provider

    async def respond(self, session_id: str, game_id: str, user_text: str) -> ChatReply:
        """Store the player's message, generate a reply, store that too."""
        content = (user_text or "").strip()
        if not content:
            raise ValidationError("Message is required and must be a non-empty string")

        game = self.catalog.get_game_by_id(game_id)
        if game is None:
            raise NotFoundError(f"No game exists with ID: {game_id}")

        log = await self.history.load(session_id, game_id)

        user_message = Message(role="user", content=content)
        await self.history.append(session_id, game_id, user_message)
        logger.debug("Stored user message for %s/%s", session_id, game_id)

        prompt = build_prompt(game.system_instruction, log.messages, user_message)
        try:
            reply_text = await self.provider.complete(prompt)
        except ProviderError:
            raise
        except Exception as e:
            logger.warning("Completion failed for game %s: %s", game_id, e)
            raise ProviderError(str(e) or type(e).__name__) from e

        if not reply_text or not reply_text.strip():
            raise ProviderError("No response content from LLM")

        assistant_message = Message(role="assistant", content=reply_text)
        await self.history.append(session_id, game_id, assistant_message)
        logger.debug("Stored assistant reply for %s/%s", session_id, game_id)

        return ChatReply(user_message=user_message, assistant_message=assistant_message)
