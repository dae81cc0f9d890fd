"""Pydantic models for GitHub API tools"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import GitHubLimits, GitObjectDefaults

_OWNER = "Repository owner (username or organization)"
_REPO = "Repository name"

SortDirection = Literal["asc", "desc"]


def _page_field(**kwargs):
    return Field(
        None,
        ge=GitHubLimits.MIN_PAGE,
        description="Page number for pagination (default: 1)",
        **kwargs,
    )


def _per_page_field(**kwargs):
    return Field(
        None,
        ge=1,
        le=GitHubLimits.MAX_PER_PAGE,
        description="Number of results per page (default: 30, max: 100)",
        **kwargs,
    )


class ToolArguments(BaseModel):
    """Base for tool argument models.

    Fields may be supplied under their published (alias) name or their
    Python name.
    """

    model_config = ConfigDict(populate_by_name=True)


# Repository tools
class CreateRepository(ToolArguments):
    name: str = Field(description="Repository name")
    description: Optional[str] = Field(None, description="Repository description")
    private: Optional[bool] = Field(None, description="Whether the repository should be private")
    auto_init: Optional[bool] = Field(None, alias="autoInit", description="Initialize with README.md")


class ForkRepository(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    organization: Optional[str] = Field(
        None,
        description="Optional: organization to fork to (defaults to your personal account)",
    )


# File tools
class CreateOrUpdateFile(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    path: str = Field(description="Path where to create/update the file")
    message: str = Field(description="Commit message")
    content: str = Field(description="Content of the file")
    branch: str = Field(description="Branch to create/update the file in")
    sha: Optional[str] = Field(
        None,
        description="SHA of the file being replaced (required when updating existing files)",
    )


class GetFileContents(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    path: str = Field(description="Path to the file or directory")
    branch: Optional[str] = Field(
        None,
        description="Branch to get contents from (defaults to the repository's default branch)",
    )


class FileContent(BaseModel):
    path: str = Field(description="Path of the file relative to the repository root")
    content: str = Field(description="Full content of the file")


class PushFiles(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    branch: str = Field(min_length=1, description="Branch to push to (e.g., 'main' or 'master')")
    message: str = Field(description="Commit message")
    files: list[FileContent] = Field(min_length=1, description="Array of files to push")


# Issue tools
class CreateIssue(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    title: str = Field(description="Issue title")
    body: Optional[str] = Field(None, description="Issue body")
    labels: Optional[list[str]] = Field(None, description="Labels to apply")
    assignees: Optional[list[str]] = Field(None, description="Usernames to assign")
    milestone: Optional[int] = Field(None, description="Milestone number to associate")


class UpdateIssue(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    issue_number: int = Field(ge=1, description="Issue number")
    title: Optional[str] = Field(None, description="New title")
    body: Optional[str] = Field(None, description="New body")
    state: Optional[Literal["open", "closed"]] = Field(None, description="New state")
    labels: Optional[list[str]] = Field(None, description="Replacement label set")
    assignees: Optional[list[str]] = Field(None, description="Replacement assignee set")
    milestone: Optional[int] = Field(None, description="Milestone number to associate")


class ListIssues(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    state: Optional[Literal["open", "closed", "all"]] = Field(None, description="Filter by state")
    sort: Optional[Literal["created", "updated", "comments"]] = Field(None, description="Sort field")
    direction: Optional[SortDirection] = Field(None, description="Sort direction")
    since: Optional[str] = Field(None, description="Only issues updated at or after this ISO 8601 timestamp")
    labels: Optional[list[str]] = Field(None, description="Only issues carrying all of these labels")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field()


class IssueComment(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    issue_number: int = Field(ge=1, description="Issue number")
    body: str = Field(description="Comment text")


class GetIssue(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    issue_number: int = Field(ge=1, description="Issue number")


# Pull request tools
class CreatePullRequest(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    title: str = Field(description="Pull request title")
    body: Optional[str] = Field(None, description="Pull request body/description")
    head: str = Field(description="The name of the branch where your changes are implemented")
    base: str = Field(description="The name of the branch you want the changes pulled into")
    draft: Optional[bool] = Field(None, description="Whether to create the pull request as a draft")
    maintainer_can_modify: Optional[bool] = Field(
        None, description="Whether maintainers can modify the pull request"
    )


# Branch and commit tools
class CreateBranch(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    branch: str = Field(min_length=1, description="Name for the new branch")
    from_branch: Optional[str] = Field(
        None,
        description="Optional: source branch to create from (defaults to the repository's default branch)",
    )


class ListCommits(ToolArguments):
    owner: str = Field(description=_OWNER)
    repo: str = Field(description=_REPO)
    sha: Optional[str] = Field(None, description="Branch name or commit SHA to start listing from")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field(alias="perPage")


# Search tools
class SearchCode(ToolArguments):
    q: str = Field(description="Search query (see GitHub code search syntax)")
    order: Optional[SortDirection] = Field(None, description="Sort order")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field()


class SearchRepositories(ToolArguments):
    query: str = Field(description="Search query (see GitHub search syntax)")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field(alias="perPage")


class SearchIssues(ToolArguments):
    q: str = Field(description="Search query (see GitHub issue search syntax)")
    sort: Optional[
        Literal[
            "comments",
            "reactions",
            "reactions-+1",
            "reactions--1",
            "reactions-smile",
            "reactions-thinking_face",
            "reactions-heart",
            "reactions-tada",
            "interactions",
            "created",
            "updated",
        ]
    ] = Field(None, description="Sort field")
    order: Optional[SortDirection] = Field(None, description="Sort order")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field()


class SearchUsers(ToolArguments):
    q: str = Field(description="Search query (see GitHub user search syntax)")
    sort: Optional[Literal["followers", "repositories", "joined"]] = Field(None, description="Sort field")
    order: Optional[SortDirection] = Field(None, description="Sort order")
    page: Optional[int] = _page_field()
    per_page: Optional[int] = _per_page_field()


# Minimal response shapes consumed by the multi-step operations.
# Only the fields actually read are modelled; everything else is ignored.
class RepositoryInfo(BaseModel):
    default_branch: str


class GitObject(BaseModel):
    sha: str


class GitReference(BaseModel):
    ref: Optional[str] = None
    object: GitObject


class GitCommitObject(BaseModel):
    sha: str
    tree: GitObject


class GitTreeEntry(BaseModel):
    """One file in a tree-creation request."""

    path: str
    mode: str = GitObjectDefaults.BLOB_MODE
    type: str = GitObjectDefaults.BLOB_TYPE
    content: str
