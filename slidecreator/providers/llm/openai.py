"""
OpenAI LLM Provider for SlideCreator.

Uses OpenAI's Chat Completions API.
"""

from __future__ import annotations

import logging
from typing import Any

from .base import BaseLLMProvider, LLMConfig, LLMResponse, Message

logger = logging.getLogger(__name__)


class OpenAILLMProvider(BaseLLMProvider):
    """
    OpenAI-based LLM provider.

    Requirements:
    - openai package
    - SLIDECREATOR_OPENAI_API_KEY environment variable
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        organization: str | None = None,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            organization: Optional OpenAI organization ID
        """
        super().__init__(default_model=model)
        self._api_key = api_key
        self._organization = organization
        self._client = None  # Lazy initialization

    @property
    def name(self) -> str:
        return "openai"

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError:
                raise ImportError(
                    "openai package is required for OpenAI LLM. Install with: pip install openai"
                )
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                organization=self._organization,
            )
        return self._client

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        """
        Generate a completion using OpenAI.

        Args:
            messages: List of conversation messages
            config: Optional configuration overrides

        Returns:
            LLMResponse with generated content
        """
        if config is None:
            config = LLMConfig()

        client = self._get_client()

        params: dict[str, Any] = {
            "model": config.model or self.default_model,
            "messages": [msg.to_dict() for msg in messages],
            "temperature": config.temperature,
        }
        if config.max_tokens is not None:
            params["max_tokens"] = config.max_tokens
        if config.response_format == "json":
            params["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**params)
        except Exception as e:
            logger.error(f"OpenAI completion error: {e}", exc_info=True)
            raise

        if not response.choices:
            return LLMResponse(content="", model=response.model, provider=self.name)

        choice = response.choices[0]
        usage = {}
        if response.usage:
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=usage,
            finish_reason=choice.finish_reason or "stop",
            provider=self.name,
        )
