"""
Provider abstractions for SlideCreator.
"""

from .llm import LLMConfig, LLMProvider, LLMResponse, Message, OpenAILLMProvider

__all__ = [
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "OpenAILLMProvider",
]
