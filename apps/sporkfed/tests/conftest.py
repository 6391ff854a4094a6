"""Shared fixtures."""

import pytest
import structlog

from fakes import FakeGitHubClient
from sporkfed.models import PushEvent, Rule


@pytest.fixture
def logs():
    """Structlog events emitted during the test, as dicts with an ``event`` key."""
    with structlog.testing.capture_logs() as captured:
        yield captured


@pytest.fixture
def github() -> FakeGitHubClient:
    return FakeGitHubClient()


@pytest.fixture
def make_rule():
    def _make_rule(
        source_path: str = "README.md",
        target_path: str = "README.md",
        owner: str = "upstream-org",
        name: str = "templates",
        source_branch: str | None = None,
        target_branch: str = "main",
    ) -> Rule:
        return Rule.model_validate({
            "upstream": {
                "repo": {"owner": owner, "name": name},
                "branch": source_branch,
                "path": source_path,
            },
            "target": {"path": target_path, "branch": target_branch},
        })

    return _make_rule


@pytest.fixture
def make_push():
    def _make_push(ref: str = "refs/heads/main", head_commit: bool = True) -> PushEvent:
        return PushEvent.model_validate({
            "ref": ref,
            "after": "f00d",
            "head_commit": {"id": "f00d", "message": "change"} if head_commit else None,
            "repository": {
                "name": "service",
                "full_name": "acme/service",
                "owner": {"login": "acme", "name": "acme"},
                "default_branch": "main",
            },
        })

    return _make_push
