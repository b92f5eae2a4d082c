"""
Process-wide configuration for the review bot.

The config is loaded once at startup and passed explicitly into the
webhook app and the orchestrator. Core code never reads os.environ itself,
so tests can build a ReviewBotConfig directly.
"""
from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from reviewbot.core.errors import ConfigError


# =============================================================================
# LIMITS
# =============================================================================
# The only admission control the bot has: a ceiling on the diff sent to the
# analysis agents and a ceiling on files that get inline suggestions.
# =============================================================================

DEFAULT_MAX_DIFF_TOKENS = 6000
DEFAULT_MAX_INLINE_FILES = 5

REQUIRED_ENV_VARS = [
    "GITHUB_APP_ID",
    "GITHUB_PRIVATE_KEY",
    "WEBHOOK_SECRET",
    "OPENAI_API_KEY",
]

# Config field -> environment variable, for reporting unusable values
OPTIONAL_ENV_VARS = {
    "openai_timeout_seconds": "OPENAI_TIMEOUT_SECONDS",
    "port": "PORT",
    "max_diff_tokens": "MAX_DIFF_TOKENS",
    "max_inline_files": "MAX_INLINE_FILES",
}


class ReviewBotConfig(BaseModel):
    github_app_id: str
    github_private_key: str
    webhook_secret: str
    openai_api_key: str

    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = Field(default=60.0, gt=0)
    port: int = 3000
    environment: str = "development"

    max_diff_tokens: int = Field(default=DEFAULT_MAX_DIFF_TOKENS, ge=1)
    max_inline_files: int = Field(default=DEFAULT_MAX_INLINE_FILES, ge=0)

    @field_validator("github_private_key")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        # PEM keys stored in .env files usually carry literal "\n" sequences
        return value.replace("\\n", "\n")


def _read_private_key(env: Mapping[str, str]) -> str:
    """
    Read the GitHub App private key from either:
    1. GITHUB_PRIVATE_KEY env var (PEM content, escaped newlines allowed)
    2. GITHUB_PRIVATE_KEY_PATH env var (file path, used in local dev)
    """
    pem_content = env.get("GITHUB_PRIVATE_KEY", "")
    if pem_content:
        return pem_content

    path = env.get("GITHUB_PRIVATE_KEY_PATH", "")
    if not path:
        return ""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def load_config(env: Optional[Mapping[str, str]] = None) -> ReviewBotConfig:
    """
    Build a ReviewBotConfig from environment variables.

    Raises ConfigError listing every missing required variable, or every
    optional variable whose value cannot be used (e.g. PORT=abc).
    """
    if env is None:
        from dotenv import load_dotenv

        load_dotenv()
        env = os.environ

    values = {
        "GITHUB_APP_ID": env.get("GITHUB_APP_ID", ""),
        "GITHUB_PRIVATE_KEY": _read_private_key(env),
        "WEBHOOK_SECRET": env.get("WEBHOOK_SECRET") or env.get("GITHUB_WEBHOOK_SECRET", ""),
        "OPENAI_API_KEY": env.get("OPENAI_API_KEY", ""),
    }
    missing = [name for name in REQUIRED_ENV_VARS if not values[name]]
    if missing:
        raise ConfigError(missing)

    try:
        return ReviewBotConfig(
            github_app_id=values["GITHUB_APP_ID"],
            github_private_key=values["GITHUB_PRIVATE_KEY"],
            webhook_secret=values["WEBHOOK_SECRET"],
            openai_api_key=values["OPENAI_API_KEY"],
            openai_model=env.get("OPENAI_MODEL", "gpt-4o-mini"),
            openai_timeout_seconds=env.get("OPENAI_TIMEOUT_SECONDS", "60"),
            port=env.get("PORT", "3000"),
            environment=env.get("APP_ENV") or env.get("NODE_ENV", "development"),
            max_diff_tokens=env.get("MAX_DIFF_TOKENS", DEFAULT_MAX_DIFF_TOKENS),
            max_inline_files=env.get("MAX_INLINE_FILES", DEFAULT_MAX_INLINE_FILES),
        )
    except ValidationError as error:
        # Numeric settings arrive as strings; pydantic converts or rejects them
        invalid = [OPTIONAL_ENV_VARS.get(str(err["loc"][0]), str(err["loc"][0])) for err in error.errors()]
        raise ConfigError(invalid=invalid) from error
