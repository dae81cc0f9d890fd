"""Startup configuration for the GitHub MCP server.

Configuration is assembled exactly once, before the server starts serving:

1. ``load_environment_variables()`` merges ``.env`` files into ``os.environ``
   (existing values win, except blank or placeholder tokens).
2. ``load_config()`` reads the environment and returns an immutable
   ``GitHubConfig``.

The resulting config is handed to ``GitHubClient``; nothing downstream reads
the environment again.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import TOKEN_PLACEHOLDERS, EnvironmentVariables, GitHubAPIDefaults

logger = logging.getLogger(__name__)

# Known GitHub token shapes; anything else only triggers a warning
_TOKEN_PATTERNS = [
    r"^ghp_[a-zA-Z0-9]{36}$",  # Personal access tokens (classic)
    r"^github_pat_[a-zA-Z0-9_]{82}$",  # Fine-grained personal access tokens
    r"^gho_[a-zA-Z0-9]{36}$",  # OAuth tokens
    r"^ghs_[a-zA-Z0-9]{36}$",  # GitHub App installation tokens
    r"^ghu_[a-zA-Z0-9]{36}$",  # GitHub App user tokens
]


class ConfigurationError(Exception):
    """Raised when the server cannot be configured to start."""


def is_placeholder_token(token: Optional[str]) -> bool:
    """Check whether a token value is missing, blank or a template placeholder."""
    if token is None:
        return True
    return token.strip() in TOKEN_PLACEHOLDERS


def looks_like_github_token(token: str) -> bool:
    """Validate GitHub token format"""
    return any(re.match(pattern, token.strip()) for pattern in _TOKEN_PATTERNS)


def _load_env_file(env_file: Path) -> None:
    token_before = os.getenv(EnvironmentVariables.TOKEN)
    load_dotenv(env_file, override=False)  # Don't override existing env vars

    # A placeholder token in the environment should not mask a real one on disk
    if is_placeholder_token(token_before):
        file_token = dotenv_values(env_file).get(EnvironmentVariables.TOKEN)
        if not is_placeholder_token(file_token):
            os.environ[EnvironmentVariables.TOKEN] = file_token


def load_environment_variables(env_file: Optional[Path] = None) -> list[str]:
    """Load environment variables from .env files.

    Order of precedence:
    1. System environment variables (unless the token is blank/placeholder)
    2. Project .env file in the current working directory
    3. Explicit env file passed on the command line

    Returns:
        The list of files that were loaded
    """
    candidates = [Path.cwd() / ".env"]
    if env_file is not None:
        candidates.append(Path(env_file))

    loaded_files = []
    for candidate in candidates:
        if not candidate.exists() or str(candidate) in loaded_files:
            continue
        try:
            _load_env_file(candidate)
        except OSError as e:
            logger.warning(f"Failed to load .env file {candidate}: {e}")
            continue
        loaded_files.append(str(candidate))
        logger.info(f"Loaded environment variables from {candidate}")

    if not loaded_files:
        logger.debug("No .env files found, using system environment variables only")
    return loaded_files


class GitHubConfig(BaseModel):
    """Immutable settings shared by every GitHub API call."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1, repr=False)
    api_url: str = GitHubAPIDefaults.API_URL
    user_agent: str = GitHubAPIDefaults.USER_AGENT

    @field_validator("token")
    @classmethod
    def _strip_token(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("token must not be blank")
        return value

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_config() -> GitHubConfig:
    """Build the server configuration from the environment.

    Raises:
        ConfigurationError: if no usable access token is configured
    """
    token = os.getenv(EnvironmentVariables.TOKEN)
    if is_placeholder_token(token):
        raise ConfigurationError(
            f"{EnvironmentVariables.TOKEN} environment variable is required"
        )

    if not looks_like_github_token(token):
        logger.warning(f"⚠️ {EnvironmentVariables.TOKEN} format appears invalid")
    else:
        logger.debug("✅ GitHub token found and validated")

    api_url = os.getenv(EnvironmentVariables.API_URL) or GitHubAPIDefaults.API_URL
    return GitHubConfig(token=token, api_url=api_url)
