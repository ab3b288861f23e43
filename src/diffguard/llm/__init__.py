"""LLM provider abstraction layer."""

from diffguard.llm.base import LLMProvider, LLMResponse, Message
from diffguard.llm.factory import create_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Message",
    "create_provider",
]
