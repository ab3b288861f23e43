"""Build the review model's provider from ``llm`` config."""

from __future__ import annotations

from diffguard.config import LLMConfig
from diffguard.exceptions import ConfigError
from diffguard.llm.base import LLMProvider

SUPPORTED_PROVIDERS = ("openai", "anthropic", "local")


def create_provider(config: LLMConfig) -> LLMProvider:
    """Create the provider named by ``config.provider``.

    ``local`` talks to an OpenAI-compatible server (Ollama, vLLM, ...) and
    needs ``llm.base_url``.

    Raises:
        ConfigError: If the provider is unknown, or ``local`` has no base URL.
        ProviderNotAvailableError: If the provider's SDK is not installed.
    """
    provider = config.provider.strip().lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Unknown LLM provider: '{config.provider}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    if provider == "anthropic":
        from diffguard.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=config.model, api_key=config.api_key, base_url=config.base_url)

    from diffguard.llm.openai_provider import OpenAIProvider

    if provider == "local":
        if not config.base_url:
            raise ConfigError(
                "The 'local' provider needs a server URL. Set it with:\n"
                "  diffguard config set llm.base_url http://localhost:11434/v1"
            )
        # OpenAI-compatible servers ignore the key, but the SDK insists on one
        return OpenAIProvider(
            model=config.model, api_key=config.api_key or "local", base_url=config.base_url
        )

    return OpenAIProvider(model=config.model, api_key=config.api_key, base_url=config.base_url)
