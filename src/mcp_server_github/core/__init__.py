"""Tool registration and dispatch for the MCP GitHub server"""

from .tools import (
    GitHubToolError,
    GitHubTools,
    InvalidToolInputError,
    ToolDefinition,
    ToolRegistry,
    ToolRouter,
    UnknownToolError,
)

__all__ = [
    "GitHubTools",
    "ToolDefinition",
    "ToolRegistry",
    "ToolRouter",
    "UnknownToolError",
    "InvalidToolInputError",
    "GitHubToolError",
]
