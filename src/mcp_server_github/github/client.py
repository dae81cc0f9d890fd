"""GitHub API client and authentication"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import aiohttp

from ..config import GitHubConfig
from ..constants import GitHubAPIDefaults
from ..error_handling import classify_response, log_github_error

logger = logging.getLogger(__name__)


def build_query(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Turn operation parameters into query-string values.

    Absent (None) values are dropped entirely, lists are comma-joined and
    booleans use GitHub's lowercase spelling.
    """
    query: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            query[key] = ",".join(str(item) for item in value)
        elif isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


@dataclass(frozen=True)
class GitHubResponse:
    """A successful, already classified GitHub response."""

    status: int
    headers: Mapping[str, str]
    body: bytes

    def json(self) -> Any:
        """Decode the body; malformed JSON is left to propagate."""
        return json.loads(self.body)

    @property
    def rate_limit_remaining(self) -> Optional[str]:
        return self.headers.get("x-ratelimit-remaining")


@dataclass
class GitHubClient:
    """GitHub API client bound to one configuration and one HTTP session."""

    config: GitHubConfig
    session: aiohttp.ClientSession

    @property
    def base_url(self) -> str:
        return self.config.api_url

    def get_headers(self, with_body: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": GitHubAPIDefaults.ACCEPT,
            "User-Agent": self.config.user_agent,
        }
        if with_body:
            headers["Content-Type"] = GitHubAPIDefaults.CONTENT_TYPE
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        data: Any = None,
    ) -> GitHubResponse:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs: dict[str, Any] = {"headers": self.get_headers(with_body=data is not None)}
        query = build_query(params)
        if query:
            kwargs["params"] = query
        if data is not None:
            kwargs["data"] = json.dumps(data)

        async with self.session.request(method, url, **kwargs) as response:
            body = await response.read()
            status = response.status
            headers = {key.lower(): value for key, value in response.headers.items()}

        error = classify_response(status, headers, body)
        if error is not None:
            log_github_error(error, f"{method} {endpoint}")
            raise error

        result = GitHubResponse(status=status, headers=headers, body=body)
        logger.debug(
            f"{method} {endpoint} -> {status}, "
            f"rate limit remaining: {result.rate_limit_remaining or 'unknown'}"
        )
        return result

    async def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> GitHubResponse:
        """Make GET request to GitHub API"""
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: Any = None) -> GitHubResponse:
        """Make POST request to GitHub API"""
        return await self._request("POST", endpoint, data=data if data is not None else {})

    async def patch(self, endpoint: str, data: Any = None) -> GitHubResponse:
        """Make PATCH request to GitHub API"""
        return await self._request("PATCH", endpoint, data=data if data is not None else {})

    async def put(self, endpoint: str, data: Any = None) -> GitHubResponse:
        """Make PUT request to GitHub API"""
        return await self._request("PUT", endpoint, data=data if data is not None else {})

    async def delete(self, endpoint: str) -> GitHubResponse:
        """Make DELETE request to GitHub API"""
        return await self._request("DELETE", endpoint)
