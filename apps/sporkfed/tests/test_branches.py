"""Tests for sync branch reset."""

import httpx
import pytest

from sporkfed.branches import reset_branch, sync_branch_name
from sporkfed.exceptions import BranchResetError


def test_sync_branch_name():
    assert sync_branch_name("docs/README.md") == "sporkfed/docs/README.md"


@pytest.mark.asyncio
async def test_reset_missing_branch(github, logs):
    github.refs[("acme", "service", "heads/main")] = "tip"

    sha = await reset_branch(github, "acme", "service", "sporkfed/README.md", "main")

    assert sha == "tip"
    assert github.refs[("acme", "service", "heads/sporkfed/README.md")] == "tip"
    assert any(e["event"] == "delete_branch_error" for e in logs)


@pytest.mark.asyncio
async def test_reset_replaces_stale_branch(github):
    github.refs[("acme", "service", "heads/main")] = "tip"
    github.refs[("acme", "service", "heads/sporkfed/README.md")] = "stale"

    await reset_branch(github, "acme", "service", "sporkfed/README.md", "main")

    assert github.refs[("acme", "service", "heads/sporkfed/README.md")] == "tip"


@pytest.mark.asyncio
async def test_reset_twice_points_at_same_commit(github):
    github.refs[("acme", "service", "heads/main")] = "tip"

    first = await reset_branch(github, "acme", "service", "sporkfed/x", "main")
    after_first = github.refs[("acme", "service", "heads/sporkfed/x")]
    second = await reset_branch(github, "acme", "service", "sporkfed/x", "main")

    assert first == second == after_first == github.refs[("acme", "service", "heads/sporkfed/x")]


@pytest.mark.asyncio
async def test_missing_default_branch_aborts(github, logs):
    with pytest.raises(BranchResetError):
        await reset_branch(github, "acme", "service", "sporkfed/x", "main")

    assert github.calls_to("create_ref") == []
    assert any(e["event"] == "create_branch_error" for e in logs)


@pytest.mark.asyncio
async def test_create_ref_failure_is_logged_not_raised(github, logs):
    github.refs[("acme", "service", "heads/main")] = "tip"
    github.failures["create_ref"] = httpx.ConnectError("boom")

    sha = await reset_branch(github, "acme", "service", "sporkfed/x", "main")

    assert sha == "tip"
    [entry] = [e for e in logs if e["event"] == "create_branch_error"]
    assert entry["sha"] == "tip"
    assert entry["log_level"] == "error"
