"""LLM service - completion providers used by the chat service.

The chat service only needs ``complete(messages) -> str``; DashScope
(通义千问) is the production implementation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from openstory.config import Settings, settings as default_settings
from openstory.errors import ProviderError

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    async def complete(self, messages: list[dict]) -> str:
        """Return the assistant reply for an ordered list of {role, content}."""
        ...


def _get_generation(api_key: str):
    """Lazy import of dashscope.Generation to avoid import-time crashes in test."""
    import dashscope
    from dashscope import Generation

    dashscope.api_key = api_key
    return Generation


class DashScopeProvider:
    def __init__(self, config: Settings | None = None):
        config = config or default_settings
        self.api_key = config.DASHSCOPE_API_KEY
        self.model = config.LLM_MODEL
        self.temperature = config.LLM_TEMPERATURE
        self.max_tokens = config.LLM_MAX_TOKENS

    def _call(self, messages: list[dict]) -> str:
        if not self.api_key:
            raise ProviderError("DASHSCOPE_API_KEY is not set")

        Generation = _get_generation(self.api_key)
        response = Generation.call(
            model=self.model,
            messages=messages,
            result_format="message",
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        if response.status_code != 200:
            logger.error("LLM API error: %s - %s", response.status_code, response.message)
            raise ProviderError(f"LLM API error: {response.status_code} - {response.message}")

        content = response.output.choices[0].message.content
        if not content:
            raise ProviderError("No response content from LLM")
        return content

    async def complete(self, messages: list[dict]) -> str:
        # The SDK call is blocking; keep it off the event loop
        return await asyncio.to_thread(self._call, messages)
