"""Base LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class Message(BaseModel):
    """A message in the conversation."""

    role: str  # "system", "user", "assistant"
    content: str = ""


class LLMResponse(BaseModel):
    """Response from the LLM."""

    content: str = ""
    finish_reason: str = ""
    usage: dict[str, int] = Field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    def __init__(self, model: str, api_key: str | None = None, base_url: str | None = None) -> None:
        self.model = model
        self.api_key = api_key
        self.base_url = base_url

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Send a completion request to the LLM."""
        ...
