"""Decide whether a target needs syncing."""

from dataclasses import dataclass
from enum import Enum

from .entries import Absent, File, RemoteEntry


class SyncAction(str, Enum):
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"
    REJECT = "reject"


@dataclass(frozen=True)
class SyncDecision:
    action: SyncAction
    reason: str

    @property
    def needs_write(self) -> bool:
        return self.action in (SyncAction.CREATE, SyncAction.UPDATE)


def decide(source: File, target: RemoteEntry) -> SyncDecision:
    """
    Compare a source file with the resolved target.

    Only a regular file or nothing at all can be replaced; symlinks,
    submodules and directories are refused.
    """
    if isinstance(target, Absent):
        return SyncDecision(SyncAction.CREATE, "Target does not exist")
    if not isinstance(target, File):
        return SyncDecision(SyncAction.REJECT, f"Target must be of 'file' type, got '{target.kind}'")
    if target.content_identity == source.content_identity:
        return SyncDecision(SyncAction.NOOP, "Target is already up to date")
    return SyncDecision(
        SyncAction.UPDATE,
        f"Target blob {target.content_identity} differs from source blob {source.content_identity}",
    )
