"""GitHub API data models."""

from pydantic import BaseModel, ConfigDict


class GitHubContent(BaseModel):
    """GitHub content item (file, dir, symlink or submodule)."""

    model_config = ConfigDict(extra="ignore")

    name: str
    path: str
    sha: str
    size: int = 0
    url: str | None = None
    html_url: str | None = None
    git_url: str | None = None
    download_url: str | None = None
    type: str  # "file", "dir", "symlink", "submodule"; anything else passes through
    content: str | None = None  # Base64 encoded content for files
    encoding: str | None = None  # Usually "base64" for files
    target: str | None = None  # Symlink target
    submodule_git_url: str | None = None


class GitHubFile(BaseModel):
    """GitHub file with decoded content."""

    name: str
    path: str
    sha: str
    size: int
    html_url: str | None = None
    content: str
    encoding: str = "utf-8"


class GitObject(BaseModel):
    """Object a git reference points at."""

    sha: str
    type: str = "commit"
    url: str | None = None


class GitBlob(BaseModel):
    """Git blob, body base64 encoded regardless of size."""

    sha: str
    size: int = 0
    content: str
    encoding: str = "base64"
    url: str | None = None


class GitRef(BaseModel):
    """Git reference (branch or tag)."""

    ref: str
    object: GitObject
    url: str | None = None


class Commit(BaseModel):
    """Commit created by a contents write."""

    model_config = ConfigDict(extra="ignore")

    sha: str
    message: str | None = None
    html_url: str | None = None


class FileCommit(BaseModel):
    """Result of a create-or-update file call."""

    content: GitHubContent | None = None
    commit: Commit


class PullRequestRef(BaseModel):
    """Head or base of a pull request."""

    model_config = ConfigDict(extra="ignore")

    ref: str
    sha: str | None = None
    label: str | None = None


class PullRequest(BaseModel):
    """GitHub pull request."""

    model_config = ConfigDict(extra="ignore")

    number: int
    title: str
    state: str = "open"
    html_url: str | None = None
    head: PullRequestRef
    base: PullRequestRef
