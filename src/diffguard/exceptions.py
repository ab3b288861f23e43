"""Custom exceptions for diffguard."""


class DiffguardError(Exception):
    """Base exception for all diffguard errors."""


class ConfigError(DiffguardError):
    """Configuration-related errors."""


class DiffError(DiffguardError):
    """Invalid parser arguments (malformed patch text is never an error)."""


class LLMError(DiffguardError):
    """LLM provider errors."""


class GitHubError(DiffguardError):
    """Errors talking to GitHub through the gh CLI."""


class ProviderNotAvailableError(LLMError):
    """Raised when an LLM provider's SDK is not installed."""

    def __init__(self, provider: str, package: str):
        super().__init__(
            f"Provider '{provider}' requires the '{package}' package. "
            f"Install it with: pip install diffguard[{provider}]"
        )
