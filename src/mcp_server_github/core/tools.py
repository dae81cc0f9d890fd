"""Tool registry and routing system for the MCP GitHub server"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp.types import TextContent, Tool
from pydantic import BaseModel, ValidationError

from ..error_handling import GitHubError, format_github_error
from ..github import api
from ..github import models
from ..github.client import GitHubClient

logger = logging.getLogger(__name__)


class GitHubTools(str, Enum):
    """Enumeration of all available GitHub tools"""

    CREATE_REPOSITORY = "create_repository"
    FORK_REPOSITORY = "fork_repository"
    CREATE_OR_UPDATE_FILE = "create_or_update_file"
    GET_FILE_CONTENTS = "get_file_contents"
    PUSH_FILES = "push_files"
    CREATE_ISSUE = "create_issue"
    UPDATE_ISSUE = "update_issue"
    LIST_ISSUES = "list_issues"
    ADD_ISSUE_COMMENT = "add_issue_comment"
    GET_ISSUE = "get_issue"
    CREATE_PULL_REQUEST = "create_pull_request"
    CREATE_BRANCH = "create_branch"
    LIST_COMMITS = "list_commits"
    SEARCH_CODE = "search_code"
    SEARCH_REPOSITORIES = "search_repositories"
    SEARCH_ISSUES = "search_issues"
    SEARCH_USERS = "search_users"


class UnknownToolError(Exception):
    """Raised when a call names a tool that is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidToolInputError(Exception):
    """Raised when arguments fail validation; lists every offending field."""

    def __init__(self, tool: str, errors: List[Dict[str, str]]):
        super().__init__(f"Invalid input: {json.dumps(errors)}")
        self.tool = tool
        self.errors = errors

    @classmethod
    def from_validation_error(cls, tool: str, error: ValidationError) -> "InvalidToolInputError":
        errors = [
            {
                "field": ".".join(str(part) for part in detail["loc"]) or "(root)",
                "message": detail["msg"],
                "type": detail["type"],
            }
            for detail in error.errors()
        ]
        return cls(tool, errors)


class GitHubToolError(Exception):
    """A classified GitHub failure rendered for the caller."""

    def __init__(self, error: GitHubError):
        super().__init__(format_github_error(error))
        self.kind = error.kind


Handler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    """Complete tool definition with metadata"""

    name: str
    description: str
    schema: Type[BaseModel]
    handler: Handler

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.schema.model_json_schema(),
        )


DEFAULT_TOOLS = [
    ToolDefinition(
        name=GitHubTools.CREATE_REPOSITORY.value,
        description="Create a new GitHub repository in your account",
        schema=models.CreateRepository,
        handler=api.create_repository,
    ),
    ToolDefinition(
        name=GitHubTools.FORK_REPOSITORY.value,
        description="Fork a GitHub repository to your account or specified organization",
        schema=models.ForkRepository,
        handler=api.fork_repository,
    ),
    ToolDefinition(
        name=GitHubTools.CREATE_OR_UPDATE_FILE.value,
        description="Create or update a single file in a GitHub repository",
        schema=models.CreateOrUpdateFile,
        handler=api.create_or_update_file,
    ),
    ToolDefinition(
        name=GitHubTools.GET_FILE_CONTENTS.value,
        description="Get the contents of a file or directory from a GitHub repository",
        schema=models.GetFileContents,
        handler=api.get_file_contents,
    ),
    ToolDefinition(
        name=GitHubTools.PUSH_FILES.value,
        description="Push multiple files to a GitHub repository in a single commit",
        schema=models.PushFiles,
        handler=api.push_files,
    ),
    ToolDefinition(
        name=GitHubTools.CREATE_ISSUE.value,
        description="Create a new issue in a GitHub repository",
        schema=models.CreateIssue,
        handler=api.create_issue,
    ),
    ToolDefinition(
        name=GitHubTools.UPDATE_ISSUE.value,
        description="Update an existing issue in a GitHub repository",
        schema=models.UpdateIssue,
        handler=api.update_issue,
    ),
    ToolDefinition(
        name=GitHubTools.LIST_ISSUES.value,
        description="List issues in a GitHub repository with filtering options",
        schema=models.ListIssues,
        handler=api.list_issues,
    ),
    ToolDefinition(
        name=GitHubTools.ADD_ISSUE_COMMENT.value,
        description="Add a comment to an existing issue",
        schema=models.IssueComment,
        handler=api.add_issue_comment,
    ),
    ToolDefinition(
        name=GitHubTools.GET_ISSUE.value,
        description="Get details of a specific issue in a GitHub repository",
        schema=models.GetIssue,
        handler=api.get_issue,
    ),
    ToolDefinition(
        name=GitHubTools.CREATE_PULL_REQUEST.value,
        description="Create a new pull request in a GitHub repository",
        schema=models.CreatePullRequest,
        handler=api.create_pull_request,
    ),
    ToolDefinition(
        name=GitHubTools.CREATE_BRANCH.value,
        description="Create a new branch in a GitHub repository",
        schema=models.CreateBranch,
        handler=api.create_branch,
    ),
    ToolDefinition(
        name=GitHubTools.LIST_COMMITS.value,
        description="Get list of commits of a branch in a GitHub repository",
        schema=models.ListCommits,
        handler=api.list_commits,
    ),
    ToolDefinition(
        name=GitHubTools.SEARCH_CODE.value,
        description="Search for code across GitHub repositories",
        schema=models.SearchCode,
        handler=api.search_code,
    ),
    ToolDefinition(
        name=GitHubTools.SEARCH_REPOSITORIES.value,
        description="Search for GitHub repositories",
        schema=models.SearchRepositories,
        handler=api.search_repositories,
    ),
    ToolDefinition(
        name=GitHubTools.SEARCH_ISSUES.value,
        description="Search for issues and pull requests across GitHub repositories",
        schema=models.SearchIssues,
        handler=api.search_issues,
    ),
    ToolDefinition(
        name=GitHubTools.SEARCH_USERS.value,
        description="Search for users on GitHub",
        schema=models.SearchUsers,
        handler=api.search_users,
    ),
]


class ToolRegistry:
    """Central registry for all GitHub tools"""

    def __init__(self):
        self.tools: Dict[str, ToolDefinition] = {}
        self._initialized = False

    def register(self, tool_def: ToolDefinition):
        """Register a tool in the registry"""
        if tool_def.name in self.tools:
            raise ValueError(f"Tool already registered: {tool_def.name}")
        self.tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name}")

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get tool definition by name"""
        return self.tools.get(name)

    def list_tools(self) -> List[Tool]:
        """Get all tools as MCP Tool objects"""
        return [tool_def.to_mcp_tool() for tool_def in self.tools.values()]

    def initialize_default_tools(self):
        """Initialize registry with the default GitHub tools"""
        if self._initialized:
            return

        for tool_def in DEFAULT_TOOLS:
            self.register(tool_def)

        self._initialized = True
        logger.info(f"Initialized tool registry with {len(self.tools)} tools")


class ToolRouter:
    """Router for dispatching tool calls to their GitHub operations"""

    def __init__(self, registry: ToolRegistry, client: GitHubClient):
        self.registry = registry
        self.client = client

    def validate(self, tool_def: ToolDefinition, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        """Validate raw arguments against the tool schema, collecting every error."""
        try:
            return tool_def.schema.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidToolInputError.from_validation_error(tool_def.name, e) from e

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> Any:
        """
        Validate and execute one tool call.

        Returns:
            The operation's JSON payload

        Raises:
            UnknownToolError: no tool is registered under ``name``
            InvalidToolInputError: the arguments do not match the tool schema
            GitHubToolError: GitHub rejected one of the requests
        """
        tool_def = self.registry.get_tool(name)
        if tool_def is None:
            raise UnknownToolError(name)

        args = self.validate(tool_def, arguments)
        kwargs = {field: getattr(args, field) for field in type(args).model_fields}

        try:
            return await tool_def.handler(self.client, **kwargs)
        except GitHubError as e:
            raise GitHubToolError(e) from e

    async def route_tool_call(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """Route a tool call and wrap its payload as MCP text content"""
        result = await self.dispatch(name, arguments)
        return [TextContent(type="text", text=json.dumps(result, indent=2))]
