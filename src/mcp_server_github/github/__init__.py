"""GitHub integration for the MCP GitHub server"""

from .api import (
    add_issue_comment,
    create_branch,
    create_issue,
    create_or_update_file,
    create_pull_request,
    create_repository,
    fork_repository,
    get_file_contents,
    get_issue,
    list_commits,
    list_issues,
    push_files,
    search_code,
    search_issues,
    search_repositories,
    search_users,
    update_issue,
)
from .client import GitHubClient, GitHubResponse, build_query

__all__ = [
    "GitHubClient",
    "GitHubResponse",
    "build_query",
    # Repositories
    "create_repository",
    "fork_repository",
    # Files
    "get_file_contents",
    "create_or_update_file",
    "push_files",
    # Issues
    "create_issue",
    "update_issue",
    "list_issues",
    "add_issue_comment",
    "get_issue",
    # Pull requests
    "create_pull_request",
    # Branches and commits
    "create_branch",
    "list_commits",
    # Search
    "search_code",
    "search_repositories",
    "search_issues",
    "search_users",
]
