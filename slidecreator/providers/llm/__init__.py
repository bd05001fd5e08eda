"""
LLM Providers for SlideCreator.
"""

from .base import BaseLLMProvider, LLMConfig, LLMProvider, LLMResponse, Message, MessageRole
from .openai import OpenAILLMProvider

__all__ = [
    "BaseLLMProvider",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "MessageRole",
    "OpenAILLMProvider",
]
