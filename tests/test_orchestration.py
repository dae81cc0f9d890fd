"""Tests for the multi-request operations: branch creation and multi-file push."""

import logging

import pytest

from mcp_server_github.error_handling import GitHubError, GitHubErrorKind
from mcp_server_github.github import api
from mcp_server_github.github.models import FileContent

REPO = "/repos/octo/hello"


class TestCreateBranch:
    @pytest.mark.asyncio
    async def test_defaults_to_repository_default_branch(
        self, github_client, fake_session, github_response_factory
    ):
        fake_session.add("GET", REPO, github_response_factory.repository_response("hello", "octo", "trunk"))
        fake_session.add("GET", f"{REPO}/git/refs/heads/trunk", github_response_factory.ref_response("trunk", "s1"))
        fake_session.add(
            "POST", f"{REPO}/git/refs", github_response_factory.ref_response("feature", "s1"), status=201
        )

        result = await api.create_branch(github_client, "octo", "hello", "feature")

        assert fake_session.calls == [
            ("GET", REPO),
            ("GET", f"{REPO}/git/refs/heads/trunk"),
            ("POST", f"{REPO}/git/refs"),
        ]
        assert fake_session.last("POST", f"{REPO}/git/refs").json == {
            "ref": "refs/heads/feature",
            "sha": "s1",
        }
        assert result["ref"] == "refs/heads/feature"

    @pytest.mark.asyncio
    async def test_explicit_source_skips_repository_lookup(
        self, github_client, fake_session, github_response_factory
    ):
        fake_session.add("GET", f"{REPO}/git/refs/heads/dev", github_response_factory.ref_response("dev", "d9"))
        fake_session.add("POST", f"{REPO}/git/refs", {"ref": "refs/heads/topic"}, status=201)

        await api.create_branch(github_client, "octo", "hello", "topic", from_branch="dev")

        assert fake_session.calls == [
            ("GET", f"{REPO}/git/refs/heads/dev"),
            ("POST", f"{REPO}/git/refs"),
        ]
        assert fake_session.last("POST", f"{REPO}/git/refs").json["sha"] == "d9"

    @pytest.mark.asyncio
    async def test_empty_source_branch_falls_back_to_default(
        self, github_client, fake_session, github_response_factory
    ):
        fake_session.add("GET", REPO, github_response_factory.repository_response("hello", "octo", "main"))
        fake_session.add("GET", f"{REPO}/git/refs/heads/main", github_response_factory.ref_response("main", "m1"))
        fake_session.add("POST", f"{REPO}/git/refs", {"ref": "refs/heads/x"}, status=201)

        await api.create_branch(github_client, "octo", "hello", "x", from_branch="")

        assert fake_session.calls == [
            ("GET", REPO),
            ("GET", f"{REPO}/git/refs/heads/main"),
            ("POST", f"{REPO}/git/refs"),
        ]
        assert fake_session.last("POST", f"{REPO}/git/refs").json["sha"] == "m1"

    @pytest.mark.asyncio
    async def test_missing_source_branch_creates_nothing(self, github_client, fake_session):
        with pytest.raises(GitHubError) as exc_info:
            await api.create_branch(github_client, "octo", "hello", "topic", from_branch="gone")

        assert exc_info.value.kind == GitHubErrorKind.NOT_FOUND
        assert ("POST", f"{REPO}/git/refs") not in fake_session.calls

    @pytest.mark.asyncio
    async def test_existing_branch_surfaces_github_rejection(
        self, github_client, fake_session, github_response_factory
    ):
        fake_session.add("GET", f"{REPO}/git/refs/heads/main", github_response_factory.ref_response())
        fake_session.add(
            "POST", f"{REPO}/git/refs", github_response_factory.validation_failed_response(), status=400
        )

        with pytest.raises(GitHubError) as exc_info:
            await api.create_branch(github_client, "octo", "hello", "main", from_branch="main")

        assert exc_info.value.kind == GitHubErrorKind.VALIDATION
        assert exc_info.value.detail["message"] == "Validation Failed"


@pytest.fixture
def push_routes(fake_session, github_response_factory):
    """Register a fully successful five-step push against branch ``main``."""
    fake_session.add("GET", f"{REPO}/git/refs/heads/main", github_response_factory.ref_response("main", "head1"))
    fake_session.add(
        "GET", f"{REPO}/git/commits/head1", github_response_factory.git_commit_response("head1", "basetree")
    )
    fake_session.add("POST", f"{REPO}/git/trees", github_response_factory.tree_response("newtree"), status=201)
    fake_session.add(
        "POST", f"{REPO}/git/commits", github_response_factory.git_commit_response("commit2", "newtree"), status=201
    )
    fake_session.add("PATCH", f"{REPO}/git/refs/heads/main", github_response_factory.ref_response("main", "commit2"))
    return fake_session


class TestPushFiles:
    @pytest.mark.asyncio
    async def test_single_file_push_runs_five_steps_in_order(self, github_client, push_routes):
        result = await api.push_files(
            github_client, "octo", "hello", "main", "Add readme", [FileContent(path="README.md", content="# Hi")]
        )

        assert push_routes.calls == [
            ("GET", f"{REPO}/git/refs/heads/main"),
            ("GET", f"{REPO}/git/commits/head1"),
            ("POST", f"{REPO}/git/trees"),
            ("POST", f"{REPO}/git/commits"),
            ("PATCH", f"{REPO}/git/refs/heads/main"),
        ]
        assert result["object"]["sha"] == "commit2"

    @pytest.mark.asyncio
    async def test_request_bodies_chain_previous_results(self, github_client, push_routes):
        files = [
            FileContent(path="a.txt", content="alpha"),
            FileContent(path="dir/b.txt", content="beta"),
        ]

        await api.push_files(github_client, "octo", "hello", "main", "Two files", files)

        assert push_routes.last("POST", f"{REPO}/git/trees").json == {
            "base_tree": "basetree",
            "tree": [
                {"path": "a.txt", "mode": "100644", "type": "blob", "content": "alpha"},
                {"path": "dir/b.txt", "mode": "100644", "type": "blob", "content": "beta"},
            ],
        }
        assert push_routes.last("POST", f"{REPO}/git/commits").json == {
            "message": "Two files",
            "tree": "newtree",
            "parents": ["head1"],
        }
        assert push_routes.last("PATCH", f"{REPO}/git/refs/heads/main").json == {"sha": "commit2"}

    @pytest.mark.asyncio
    async def test_many_files_make_exactly_one_commit(self, github_client, push_routes):
        files = [{"path": f"f{i}.txt", "content": str(i)} for i in range(5)]

        await api.push_files(github_client, "octo", "hello", "main", "Five files", files)

        assert push_routes.calls.count(("POST", f"{REPO}/git/commits")) == 1
        assert len(push_routes.last("POST", f"{REPO}/git/trees").json["tree"]) == 5

    @pytest.mark.asyncio
    async def test_missing_branch_stops_before_any_write(self, github_client, fake_session):
        with pytest.raises(GitHubError) as exc_info:
            await api.push_files(
                github_client, "octo", "hello", "nope", "msg", [FileContent(path="x", content="y")]
            )

        assert exc_info.value.kind == GitHubErrorKind.NOT_FOUND
        assert fake_session.calls == [("GET", f"{REPO}/git/refs/heads/nope")]

    @pytest.mark.asyncio
    async def test_tree_failure_stops_before_commit(self, github_client, push_routes):
        push_routes.add("POST", f"{REPO}/git/trees", {"message": "Bad tree"}, status=500)

        with pytest.raises(GitHubError) as exc_info:
            await api.push_files(github_client, "octo", "hello", "main", "m", [FileContent(path="x", content="y")])

        assert exc_info.value.kind == GitHubErrorKind.GENERIC
        assert ("POST", f"{REPO}/git/commits") not in push_routes.calls
        assert ("PATCH", f"{REPO}/git/refs/heads/main") not in push_routes.calls

    @pytest.mark.asyncio
    async def test_commit_failure_leaves_branch_untouched(self, github_client, push_routes):
        push_routes.add("POST", f"{REPO}/git/commits", {"message": "Forbidden"}, status=403)

        with pytest.raises(GitHubError) as exc_info:
            await api.push_files(github_client, "octo", "hello", "main", "m", [FileContent(path="x", content="y")])

        assert exc_info.value.kind == GitHubErrorKind.PERMISSION
        assert ("PATCH", f"{REPO}/git/refs/heads/main") not in push_routes.calls

    @pytest.mark.asyncio
    async def test_ref_update_failure_reports_unreferenced_commit(self, github_client, push_routes, caplog):
        push_routes.add(
            "PATCH", f"{REPO}/git/refs/heads/main", {"message": "Update is not a fast forward"}, status=409
        )

        with caplog.at_level(logging.WARNING, logger="mcp_server_github.github.api"):
            with pytest.raises(GitHubError) as exc_info:
                await api.push_files(
                    github_client, "octo", "hello", "main", "m", [FileContent(path="x", content="y")]
                )

        assert exc_info.value.kind == GitHubErrorKind.CONFLICT
        assert exc_info.value.message == "Update is not a fast forward"
        assert "commit2" in caplog.text
        assert "unreferenced" in caplog.text


class TestBuildTreeEntries:
    def test_accepts_models_and_plain_dicts(self):
        entries = api.build_tree_entries(
            [FileContent(path="a", content="1"), {"path": "b", "content": "2"}]
        )

        assert entries == [
            {"path": "a", "mode": "100644", "type": "blob", "content": "1"},
            {"path": "b", "mode": "100644", "type": "blob", "content": "2"},
        ]
