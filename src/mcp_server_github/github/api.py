"""GitHub API operations for the MCP GitHub server.

Every operation takes an authenticated ``GitHubClient`` followed by already
validated arguments, and returns the decoded JSON payload unchanged. Optional
arguments are only sent when they are not ``None`` so GitHub's own defaults
stay in effect.
"""

import base64
import logging
from typing import Any, Iterable, Optional, Union

from ..constants import GitObjectDefaults
from ..error_handling import GitHubError
from .client import GitHubClient
from .models import (
    FileContent,
    GitCommitObject,
    GitObject,
    GitReference,
    GitTreeEntry,
    RepositoryInfo,
)

logger = logging.getLogger(__name__)


def _present(**fields: Any) -> dict[str, Any]:
    """Keep only the fields the caller actually supplied."""
    return {key: value for key, value in fields.items() if value is not None}


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{owner}/{repo}"


# Repositories
async def create_repository(
    client: GitHubClient,
    name: str,
    description: Optional[str] = None,
    private: Optional[bool] = None,
    auto_init: Optional[bool] = None,
) -> Any:
    """Create a new repository for the authenticated user"""
    data = {"name": name}
    data.update(_present(description=description, private=private, auto_init=auto_init))
    response = await client.post("/user/repos", data)
    return response.json()


async def fork_repository(
    client: GitHubClient,
    owner: str,
    repo: str,
    organization: Optional[str] = None,
) -> Any:
    """Fork a repository into the user's account or an organization"""
    response = await client.post(
        f"{_repo_path(owner, repo)}/forks", _present(organization=organization)
    )
    return response.json()


# Files
async def get_file_contents(
    client: GitHubClient,
    owner: str,
    repo: str,
    path: str,
    branch: Optional[str] = None,
) -> Any:
    """Get the contents of a file or directory"""
    response = await client.get(
        f"{_repo_path(owner, repo)}/contents/{path}", params={"ref": branch}
    )
    return response.json()


async def create_or_update_file(
    client: GitHubClient,
    owner: str,
    repo: str,
    path: str,
    message: str,
    content: str,
    branch: str,
    sha: Optional[str] = None,
) -> Any:
    """Create a file, or update it when the blob sha being replaced is given"""
    data = {
        "message": message,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        "branch": branch,
    }
    if sha is not None:
        data["sha"] = sha

    response = await client.put(f"{_repo_path(owner, repo)}/contents/{path}", data)
    return response.json()


def build_tree_entries(files: Iterable[Union[FileContent, dict]]) -> list[dict[str, str]]:
    """Build the tree-creation payload, one regular-file blob per file."""
    entries = []
    for file in files:
        if isinstance(file, dict):
            file = FileContent.model_validate(file)
        entries.append(GitTreeEntry(path=file.path, content=file.content).model_dump())
    return entries


async def push_files(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    message: str,
    files: list[Union[FileContent, dict]],
) -> Any:
    """
    Push several files to a branch as a single commit.

    The steps run strictly in order, each consuming the previous result:
    branch ref -> head commit -> new tree -> new commit -> ref update.
    Nothing is rolled back on failure; if the final ref update fails the new
    commit and tree stay on GitHub unreferenced and the branch is unchanged.
    """
    base = _repo_path(owner, repo)

    ref_response = await client.get(f"{base}/git/refs/heads/{branch}")
    latest_commit_sha = GitReference.model_validate(ref_response.json()).object.sha
    logger.info(f"push_files: {owner}/{repo}@{branch} is at {latest_commit_sha}")

    commit_response = await client.get(f"{base}/git/commits/{latest_commit_sha}")
    base_tree_sha = GitCommitObject.model_validate(commit_response.json()).tree.sha

    tree_response = await client.post(
        f"{base}/git/trees",
        {"base_tree": base_tree_sha, "tree": build_tree_entries(files)},
    )
    new_tree_sha = GitObject.model_validate(tree_response.json()).sha
    logger.info(f"push_files: created tree {new_tree_sha} with {len(files)} file(s)")

    new_commit_response = await client.post(
        f"{base}/git/commits",
        {"message": message, "tree": new_tree_sha, "parents": [latest_commit_sha]},
    )
    new_commit_sha = GitObject.model_validate(new_commit_response.json()).sha
    logger.info(f"push_files: created commit {new_commit_sha}")

    try:
        update_response = await client.patch(
            f"{base}/git/refs/heads/{branch}", {"sha": new_commit_sha}
        )
    except GitHubError:
        logger.warning(
            f"⚠️ push_files: branch {branch} was not moved; "
            f"commit {new_commit_sha} is left unreferenced"
        )
        raise

    logger.info(f"push_files: {branch} now points at {new_commit_sha}")
    return update_response.json()


# Issues
async def create_issue(
    client: GitHubClient,
    owner: str,
    repo: str,
    title: str,
    body: Optional[str] = None,
    labels: Optional[list[str]] = None,
    assignees: Optional[list[str]] = None,
    milestone: Optional[int] = None,
) -> Any:
    """Create a new issue"""
    data = {"title": title}
    data.update(_present(body=body, labels=labels, assignees=assignees, milestone=milestone))
    response = await client.post(f"{_repo_path(owner, repo)}/issues", data)
    return response.json()


async def update_issue(
    client: GitHubClient,
    owner: str,
    repo: str,
    issue_number: int,
    title: Optional[str] = None,
    body: Optional[str] = None,
    state: Optional[str] = None,
    labels: Optional[list[str]] = None,
    assignees: Optional[list[str]] = None,
    milestone: Optional[int] = None,
) -> Any:
    """Update an existing issue; omitted fields are left untouched"""
    data = _present(
        title=title,
        body=body,
        state=state,
        labels=labels,
        assignees=assignees,
        milestone=milestone,
    )
    response = await client.patch(f"{_repo_path(owner, repo)}/issues/{issue_number}", data)
    return response.json()


async def list_issues(
    client: GitHubClient,
    owner: str,
    repo: str,
    state: Optional[str] = None,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    since: Optional[str] = None,
    labels: Optional[list[str]] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List issues in a repository"""
    params = {
        "state": state,
        "sort": sort,
        "direction": direction,
        "since": since,
        "labels": labels,
        "page": page,
        "per_page": per_page,
    }
    response = await client.get(f"{_repo_path(owner, repo)}/issues", params=params)
    return response.json()


async def add_issue_comment(
    client: GitHubClient, owner: str, repo: str, issue_number: int, body: str
) -> Any:
    """Add a comment to an issue"""
    response = await client.post(
        f"{_repo_path(owner, repo)}/issues/{issue_number}/comments", {"body": body}
    )
    return response.json()


async def get_issue(client: GitHubClient, owner: str, repo: str, issue_number: int) -> Any:
    response = await client.get(f"{_repo_path(owner, repo)}/issues/{issue_number}")
    return response.json()


# Pull requests
async def create_pull_request(
    client: GitHubClient,
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: Optional[str] = None,
    draft: Optional[bool] = None,
    maintainer_can_modify: Optional[bool] = None,
) -> Any:
    """Create a new pull request"""
    data = {"title": title, "head": head, "base": base}
    data.update(_present(body=body, draft=draft, maintainer_can_modify=maintainer_can_modify))
    response = await client.post(f"{_repo_path(owner, repo)}/pulls", data)
    return response.json()


# Branches and commits
async def create_branch(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    from_branch: Optional[str] = None,
) -> Any:
    """
    Create a branch pointing at the head of another branch.

    Without ``from_branch`` (or with an empty one) the repository's default
    branch is looked up first. A failure at any step stops the sequence; no
    ref is created unless the source commit was resolved.
    """
    base = _repo_path(owner, repo)

    if not from_branch:
        repo_response = await client.get(base)
        from_branch = RepositoryInfo.model_validate(repo_response.json()).default_branch
        logger.debug(f"create_branch: using default branch {from_branch}")

    ref_response = await client.get(f"{base}/git/refs/heads/{from_branch}")
    sha = GitReference.model_validate(ref_response.json()).object.sha

    response = await client.post(
        f"{base}/git/refs",
        {"ref": f"{GitObjectDefaults.HEADS_PREFIX}{branch}", "sha": sha},
    )
    logger.info(f"create_branch: {owner}/{repo} {branch} created from {from_branch} at {sha}")
    return response.json()


async def list_commits(
    client: GitHubClient,
    owner: str,
    repo: str,
    sha: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List commits on a branch or starting from a commit"""
    params = {"sha": sha, "page": page, "per_page": per_page}
    response = await client.get(f"{_repo_path(owner, repo)}/commits", params=params)
    return response.json()


# Search
async def search_code(
    client: GitHubClient,
    q: str,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    response = await client.get(
        "/search/code", params={"q": q, "order": order, "page": page, "per_page": per_page}
    )
    return response.json()


async def search_repositories(
    client: GitHubClient,
    query: str,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    response = await client.get(
        "/search/repositories", params={"q": query, "page": page, "per_page": per_page}
    )
    return response.json()


async def search_issues(
    client: GitHubClient,
    q: str,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """Search issues and pull requests"""
    params = {"q": q, "sort": sort, "order": order, "page": page, "per_page": per_page}
    response = await client.get("/search/issues", params=params)
    return response.json()


async def search_users(
    client: GitHubClient,
    q: str,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    params = {"q": q, "sort": sort, "order": order, "page": page, "per_page": per_page}
    response = await client.get("/search/users", params=params)
    return response.json()
