"""
LLM Provider Protocol for SlideCreator.

Every generation call is a two-message chat completion: a system message
carrying the resolved system prompt and a user message carrying the
rendered sources followed by the resolved generation prompt.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass
class Message:
    """One chat message sent to the generation service."""

    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)


@dataclass
class LLMResponse:
    """
    Raw completion returned by a provider.

    Attributes:
        content: Generated text, expected to be a JSON document
        model: Model that produced the completion
        usage: Token counts keyed "input_tokens" / "output_tokens"
        finish_reason: Why generation stopped
        provider: Name of the provider that served the call
    """

    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: str = "stop"
    provider: str = ""

    @property
    def total_tokens(self) -> int:
        return self.usage.get("input_tokens", 0) + self.usage.get("output_tokens", 0)


@dataclass
class LLMConfig:
    """
    Per-call generation settings.

    Attributes:
        model: Model identifier; None selects the provider's default
        temperature: Sampling temperature (0.0 to 2.0)
        max_tokens: Completion length cap; None leaves it to the service
        response_format: "json" forces a JSON-object completion
    """

    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    response_format: Optional[str] = None


@runtime_checkable
class LLMProvider(Protocol):
    """Chat-completion backend used by GenerationClient."""

    @property
    def name(self) -> str:
        ...

    async def complete(
        self,
        messages: List[Message],
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        ...


class BaseLLMProvider(ABC):
    """Holds the default model shared by concrete providers."""

    def __init__(self, default_model: str = ""):
        self.default_model = default_model

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        pass
