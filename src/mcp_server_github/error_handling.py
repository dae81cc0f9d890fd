"""Error classification for GitHub API responses."""

import json
import logging
from enum import Enum
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"


class GitHubErrorKind(str, Enum):
    """Closed set of failure kinds a GitHub response can be classified into."""

    VALIDATION = "validation"  # 400
    AUTHENTICATION = "authentication"  # 401
    PERMISSION = "permission"  # 403
    RATE_LIMIT = "rate_limit"  # 403 with no requests remaining
    NOT_FOUND = "not_found"  # 404
    CONFLICT = "conflict"  # 409
    GENERIC = "generic"  # any other non-2xx


class GitHubError(Exception):
    """A classified GitHub API failure.

    One exception type covers every kind; callers branch on ``kind`` rather
    than on subclasses. ``detail`` holds the parsed error body and is only
    populated for validation failures.
    """

    def __init__(
        self,
        kind: GitHubErrorKind,
        message: str,
        status: Optional[int] = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.detail = detail

    def __repr__(self) -> str:
        return f"GitHubError(kind={self.kind.value!r}, status={self.status!r}, message={self.message!r})"


_STATUS_KINDS = {
    400: GitHubErrorKind.VALIDATION,
    401: GitHubErrorKind.AUTHENTICATION,
    404: GitHubErrorKind.NOT_FOUND,
    409: GitHubErrorKind.CONFLICT,
}


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup that works on plain dicts too."""
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _parse_body(body: Any) -> Any:
    """Best-effort JSON decode of an error body; never raises."""
    if body is None:
        return None
    if isinstance(body, (dict, list)):
        return body
    try:
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8")
        if not body:
            return None
        return json.loads(body)
    except (ValueError, UnicodeDecodeError, TypeError):
        return None


def classify_response(
    status: int,
    headers: Optional[Mapping[str, str]] = None,
    body: Any = None,
) -> Optional[GitHubError]:
    """
    Classify a GitHub response.

    Args:
        status: HTTP status code
        headers: Response headers (only the rate-limit header is consulted)
        body: Raw response body (bytes/str) or an already decoded document

    Returns:
        None for 2xx responses, otherwise the GitHubError describing the failure
    """
    if 200 <= status < 300:
        return None

    data = _parse_body(body)
    message = None
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        message = data["message"]
    if message is None:
        message = f"HTTP error {status}"

    if status == 403:
        if _header(headers, RATE_LIMIT_REMAINING_HEADER) == "0":
            kind = GitHubErrorKind.RATE_LIMIT
        else:
            kind = GitHubErrorKind.PERMISSION
    else:
        kind = _STATUS_KINDS.get(status, GitHubErrorKind.GENERIC)

    detail = data if kind == GitHubErrorKind.VALIDATION else None
    return GitHubError(kind, message, status=status, detail=detail)


# Prefix / suffix per kind; every member of GitHubErrorKind must appear here.
_ERROR_PHRASES = {
    GitHubErrorKind.VALIDATION: ("Validation Error", ""),
    GitHubErrorKind.AUTHENTICATION: (
        "Authentication Error",
        ". Please check your GitHub token.",
    ),
    GitHubErrorKind.PERMISSION: (
        "Permission Error",
        ". Your token may not have the required permissions.",
    ),
    GitHubErrorKind.RATE_LIMIT: ("Rate Limit Error", ". Please try again later."),
    GitHubErrorKind.NOT_FOUND: ("Resource Not Found", ""),
    GitHubErrorKind.CONFLICT: (
        "Conflict Error",
        ". The operation conflicts with the current state.",
    ),
    GitHubErrorKind.GENERIC: ("GitHub API Error", ""),
}


def format_github_error(error: GitHubError) -> str:
    """Render a classified error as the message shown to tool callers."""
    prefix, suffix = _ERROR_PHRASES[error.kind]
    message = f"{prefix}: {error.message}{suffix}"

    if error.kind == GitHubErrorKind.VALIDATION and error.detail is not None:
        message += f"\nDetails: {json.dumps(error.detail)}"

    return message


def log_github_error(error: GitHubError, operation: str = "") -> None:
    """Log a classified failure without leaking request details."""
    logger.warning(
        f"⚠️ GitHub {error.kind.value} error (status {error.status})"
        + (f" in {operation}" if operation else "")
        + f": {error.message}",
        extra={"error_kind": error.kind.value, "status": error.status},
    )
