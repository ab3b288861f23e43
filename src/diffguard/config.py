"""Configuration management for diffguard."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from diffguard.diff.addressing import DEFAULT_SCHEME, SCHEMES
from diffguard.exceptions import ConfigError

DIFFGUARD_DIR = ".diffguard"
CONFIG_FILE = "config.json"


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str = ""
    max_tokens: int = 4096
    temperature: float = 0.0
    base_url: str | None = None

    @property
    def api_key(self) -> str | None:
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        env_map = {
            "openai": "OPENAI_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
        }
        env_var = env_map.get(self.provider, "")
        return os.environ.get(env_var)


class GitHubConfig(BaseModel):
    """How the bot talks to GitHub."""

    token_env: str = "GITHUB_TOKEN"
    bot_login: str = "github-actions[bot]"
    fetch_full_content: bool = False

    @property
    def token(self) -> str | None:
        return os.environ.get(self.token_env)


class ReviewConfig(BaseModel):
    """Review behavior configuration."""

    scheme: str = DEFAULT_SCHEME
    prompts_dir: str = "prompts"
    project_name: str = ""
    review_pr_info: bool = True
    max_files: int = 30
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "*.lock",
            "package-lock.json",
            "yarn.lock",
            "pnpm-lock.yaml",
            "poetry.lock",
            "*.min.js",
            "*.min.css",
            "*.map",
            "dist/*",
        ]
    )

    @field_validator("scheme")
    @classmethod
    def _known_scheme(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SCHEMES:
            raise ValueError(
                f"unknown addressing scheme '{value}' (expected one of: {', '.join(SCHEMES)})"
            )
        return value


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    llm: LLMConfig = Field(default_factory=LLMConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .diffguard directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DIFFGUARD_DIR).is_dir():
            return current
        current = current.parent
    if (current / DIFFGUARD_DIR).is_dir():
        return current
    return None


def get_diffguard_dir(root: Path) -> Path:
    """Get the .diffguard directory for a project root."""
    return root / DIFFGUARD_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .diffguard/config.json."""
    config_path = get_diffguard_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return ProjectConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .diffguard/config.json."""
    dg_dir = get_diffguard_dir(root)
    dg_dir.mkdir(parents=True, exist_ok=True)
    config_path = dg_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'review.scheme')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}") from e
