"""Remote filesystem entries.

The contents API answers a path query with one of several shapes: a single
object whose ``type`` is ``file``, ``symlink`` or ``submodule``, or a list of
such objects when the path is a directory. ``classify`` turns that raw answer
into exactly one of the entry classes below, so the rest of sporkfed only ever
deals with a closed set of cases.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from gh import GitHubContent


@dataclass(frozen=True)
class File:
    """Regular file."""

    kind: ClassVar[str] = "file"

    content_identity: str  # Git blob sha
    raw_content: str  # Base64 encoded body
    name: str
    path: str
    size: int = 0

    @property
    def identity(self) -> str | None:
        return self.content_identity

    @property
    def body_omitted(self) -> bool:
        """The contents API left the body out (files over 1 MB)."""
        return not self.raw_content and self.size > 0


@dataclass(frozen=True)
class Symlink:
    """Symbolic link."""

    kind: ClassVar[str] = "symlink"

    content_identity: str
    name: str
    path: str

    @property
    def identity(self) -> str | None:
        return self.content_identity


@dataclass(frozen=True)
class Submodule:
    """Git submodule."""

    kind: ClassVar[str] = "submodule"

    content_identity: str
    name: str
    path: str

    @property
    def identity(self) -> str | None:
        return self.content_identity


@dataclass(frozen=True)
class Directory:
    """
    Directory listing, one level deep.

    Sub-directories in the listing are kept as ``Directory`` entries without
    entries of their own, so a path naming one is seen as a directory rather
    than as missing.
    """

    kind: ClassVar[str] = "directory"

    path: str
    entries: tuple["File | Symlink | Submodule | Directory", ...] = field(default_factory=tuple)

    @property
    def identity(self) -> str | None:
        return None

    def find(self, path: str) -> "File | Symlink | Submodule | Directory | None":
        """Return the first entry whose path is exactly ``path``."""
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None


@dataclass(frozen=True)
class Absent:
    """Nothing usable at the path: missing, unreadable or of an unknown type."""

    kind: ClassVar[str] = "absent"

    @property
    def identity(self) -> str | None:
        # None never equals a blob sha
        return None


LeafEntry = File | Symlink | Submodule
RemoteEntry = File | Symlink | Submodule | Directory | Absent

ABSENT = Absent()


def _classify_item(item: GitHubContent) -> RemoteEntry:
    if item.type == "file":
        return File(
            content_identity=item.sha,
            raw_content=item.content or "",
            name=item.name,
            path=item.path,
            size=item.size,
        )
    if item.type == "symlink":
        return Symlink(content_identity=item.sha, name=item.name, path=item.path)
    if item.type == "submodule":
        return Submodule(content_identity=item.sha, name=item.name, path=item.path)
    return ABSENT


def classify(raw: GitHubContent | list[GitHubContent], path: str) -> RemoteEntry:
    """
    Classify a contents API answer.

    Args:
        raw: Single content item, or a list of items for a directory
        path: Path that was queried

    Returns:
        The matching entry; unknown types become Absent
    """
    if isinstance(raw, list):
        entries = []
        for item in raw:
            if item.type == "dir":
                # Not expanded, only marks the path as taken
                entries.append(Directory(path=item.path))
                continue
            entry = _classify_item(item)
            if not isinstance(entry, Absent):
                entries.append(entry)
        return Directory(path=path, entries=tuple(entries))
    return _classify_item(raw)
