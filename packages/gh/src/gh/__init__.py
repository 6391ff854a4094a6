"""GitHub API client utilities."""

from .client import GitHubClient, get_token, is_not_found
from .models import (
    Commit,
    FileCommit,
    GitBlob,
    GitHubContent,
    GitHubFile,
    GitObject,
    GitRef,
    PullRequest,
    PullRequestRef,
)

__all__ = [
    "GitHubClient",
    "GitHubContent",
    "GitHubFile",
    "GitBlob",
    "GitObject",
    "GitRef",
    "Commit",
    "FileCommit",
    "PullRequest",
    "PullRequestRef",
    "get_token",
    "is_not_found",
]
