"""
Global pytest configuration and fixtures for the MCP GitHub server tests.

Every test that talks to "GitHub" goes through ``FakeGitHubSession``; no test
opens a network connection.
"""

import os
from unittest.mock import patch

import pytest

from mcp_server_github.config import GitHubConfig
from mcp_server_github.core.tools import ToolRegistry, ToolRouter
from mcp_server_github.github.client import GitHubClient

from .fixtures.github_responses import FakeGitHubSession, GitHubResponseFactory

TEST_TOKEN = "ghp_" + "a" * 36


@pytest.fixture
def clean_environment():
    """Run a test with no GitHub-related environment variables set."""
    env = {
        key: value
        for key, value in os.environ.items()
        if key not in ("GITHUB_PERSONAL_ACCESS_TOKEN", "GITHUB_API_URL")
    }
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def github_config() -> GitHubConfig:
    return GitHubConfig(token=TEST_TOKEN)


@pytest.fixture
def fake_session() -> FakeGitHubSession:
    return FakeGitHubSession()


@pytest.fixture
def github_client(github_config, fake_session) -> GitHubClient:
    return GitHubClient(config=github_config, session=fake_session)


@pytest.fixture
def tool_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.initialize_default_tools()
    return registry


@pytest.fixture
def tool_router(tool_registry, github_client) -> ToolRouter:
    return ToolRouter(tool_registry, github_client)


@pytest.fixture
def github_response_factory():
    """Provide access to GitHubResponseFactory."""
    return GitHubResponseFactory


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests between components")


def pytest_collection_modifyitems(config, items):
    """Mark dispatcher and server tests as integration, everything else as unit."""
    for item in items:
        if "tool_router" in item.fixturenames or "test_server" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
