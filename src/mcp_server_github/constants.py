"""Constants for the GitHub MCP server.

Values are grouped in small classes so callers can see at a glance which
concern a value belongs to:

    >>> from mcp_server_github.constants import GitHubAPIDefaults
    >>> GitHubAPIDefaults.API_URL
    'https://api.github.com'
"""

from typing import Final

SERVER_NAME: Final[str] = "github-mcp-server"
SERVER_VERSION: Final[str] = "0.1.0"


class GitHubAPIDefaults:
    """Defaults for talking to the GitHub REST API."""

    API_URL: Final[str] = "https://api.github.com"
    ACCEPT: Final[str] = "application/vnd.github.v3+json"
    CONTENT_TYPE: Final[str] = "application/json"
    USER_AGENT: Final[str] = f"{SERVER_NAME}/{SERVER_VERSION}"


class GitObjectDefaults:
    """Fixed values used when building git objects through the API."""

    BLOB_MODE: Final[str] = "100644"  # regular, non-executable file
    BLOB_TYPE: Final[str] = "blob"
    HEADS_PREFIX: Final[str] = "refs/heads/"


class GitHubLimits:
    """Bounds GitHub enforces on request parameters."""

    MIN_PAGE: Final[int] = 1
    MAX_PER_PAGE: Final[int] = 100


class EnvironmentVariables:
    """Environment variable names read at startup."""

    TOKEN: Final[str] = "GITHUB_PERSONAL_ACCESS_TOKEN"
    API_URL: Final[str] = "GITHUB_API_URL"
    LOG_LEVEL: Final[str] = "LOG_LEVEL"


# Values that show up in copied .env templates and must never be used as a token
TOKEN_PLACEHOLDERS: Final[tuple] = ("", "YOUR_TOKEN_HERE", "REPLACE_ME", "TODO", "CHANGEME")
