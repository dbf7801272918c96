"""Configuration management for cocommit."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

Provider = Literal["openai", "anthropic", "google"]

# First entry is the default model for the provider
PROVIDER_MODELS: dict[str, list[str]] = {
    "openai": ["gpt-4o-mini", "gpt-4o", "gpt-3.5-turbo"],
    "anthropic": [
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
    ],
    "google": ["gemini-1.5-pro", "gemini-1.5-flash"],
}

PROVIDER_LABELS: dict[str, str] = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "google": "Google AI",
}


class AIConfig(BaseModel):
    """Provider settings used by the structured generator."""

    provider: Provider = Field(description="Text-generation provider")
    model: str = Field(min_length=1, description="Model identifier for the provider")
    api_key: str = Field(min_length=1, description="API key for the provider")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_context_files: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of files rendered into the prompt context",
    )

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            return Path(xdg_config) / "cocommit" / "config.json"
        if os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home()))
        else:
            base = Path.home() / ".config"
        return base / "cocommit" / "config.json"


def _read_config_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def load_config() -> AIConfig | None:
    """Load configuration from environment variables and the config file.

    Priority: Environment variables > .env files > Config file

    Returns:
        The configuration, or None if provider, model or API key is missing.
    """
    load_dotenv(Path.cwd() / ".env.local")
    load_dotenv(find_dotenv(usecwd=True))

    path = AIConfig.get_config_path()
    config_data = _read_config_file(path)

    if provider := os.getenv("COCOMMIT_PROVIDER"):
        config_data["provider"] = provider
    if model := os.getenv("COCOMMIT_MODEL"):
        config_data["model"] = model
    if api_key := os.getenv("COCOMMIT_API_KEY"):
        config_data["api_key"] = api_key

    if not all(config_data.get(key) for key in ("provider", "model", "api_key")):
        logger.debug("Configuration incomplete (path: %s)", path)
        return None

    try:
        return AIConfig(**config_data)
    except ValidationError as e:
        logger.warning("Ignoring invalid configuration: %s", e)
        return None


def save_config(config: AIConfig) -> Path:
    """Write the configuration to the user config file.

    Args:
        config: The configuration to persist.

    Returns:
        Path of the written file.
    """
    path = AIConfig.get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    try:
        path.chmod(0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", path)
    return path
