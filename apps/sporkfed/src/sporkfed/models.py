"""Sporkfed data models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpstreamRepo(BaseModel):
    """Repository a rule reads from."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str


class Upstream(BaseModel):
    """Source side of a rule."""

    model_config = ConfigDict(frozen=True)

    repo: UpstreamRepo
    branch: str | None = None  # default branch of the upstream repo when omitted
    path: str


class Target(BaseModel):
    """Target side of a rule, inside the repository that received the push."""

    model_config = ConfigDict(frozen=True)

    path: str
    branch: str


class Rule(BaseModel):
    """One upstream file mirrored to one target location."""

    model_config = ConfigDict(frozen=True)

    upstream: Upstream
    target: Target

    @property
    def repo_owner(self) -> str:
        return self.upstream.repo.owner

    @property
    def repo_name(self) -> str:
        return self.upstream.repo.name

    def describe(self) -> str:
        """Short human readable form used in logs."""
        return (
            f"{self.repo_owner}/{self.repo_name}:{self.upstream.path}"
            f" -> {self.target.path}@{self.target.branch}"
        )


class SporkfedConfig(BaseModel):
    """Rule configuration stored in the target repository."""

    model_config = ConfigDict(frozen=True)

    version: Literal["1"] = "1"
    rules: list[Rule] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # `version: 1` in YAML loads as an int
        return str(value) if isinstance(value, int) else value


class RepositoryOwner(BaseModel):
    """Owner block of a webhook repository."""

    model_config = ConfigDict(extra="ignore")

    login: str


class Repository(BaseModel):
    """Repository block of a push payload."""

    model_config = ConfigDict(extra="ignore")

    name: str
    owner: RepositoryOwner
    default_branch: str


class PushEvent(BaseModel):
    """The parts of a GitHub push payload sporkfed reads."""

    model_config = ConfigDict(extra="ignore")

    ref: str
    after: str | None = None
    head_commit: dict[str, Any] | None = None
    repository: Repository

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name

    @property
    def default_branch(self) -> str:
        return self.repository.default_branch
