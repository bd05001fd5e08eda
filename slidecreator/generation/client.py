"""
Generation client adapter.

Wraps a chat-completion provider behind a single call: system text and user
text in, raw JSON text out. One attempt per call; there is no retry and no
timeout around the upstream request.
"""

from __future__ import annotations

import logging

from slidecreator.errors import GenerationError
from slidecreator.providers.llm import LLMConfig, LLMProvider, Message

logger = logging.getLogger(__name__)


class GenerationClient:
    """
    Calls the configured LLM provider in forced JSON-object mode.

    Example:
        client = GenerationClient(OpenAILLMProvider(api_key=...), model="gpt-4o")
        text = await client.generate(system_content, user_content)
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        temperature: float = 0.7,
    ):
        self._provider = provider
        self._model = model
        self._temperature = temperature

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    async def generate(self, system_content: str, user_content: str) -> str:
        """
        Run one completion and return its raw text.

        Raises:
            GenerationError: If the provider fails or returns empty content
        """
        config = LLMConfig(
            model=self._model,
            temperature=self._temperature,
            response_format="json",
        )
        messages = [Message.system(system_content), Message.user(user_content)]

        try:
            response = await self._provider.complete(messages, config)
        except Exception as e:
            logger.error(f"Generation call via '{self._provider.name}' failed: {e}")
            raise GenerationError(f"Generation service error: {e}") from e

        if not response.content:
            raise GenerationError("Empty response from generation service")

        logger.debug(
            f"Generation complete: provider={response.provider or self._provider.name}, "
            f"model={response.model}, tokens={response.total_tokens}"
        )
        return response.content
