"""Pick the file a rule actually writes to."""

from dataclasses import dataclass

from .entries import ABSENT, Directory, File, RemoteEntry


@dataclass(frozen=True)
class TargetResolution:
    effective_path: str
    effective_entry: RemoteEntry


def resolve_target(source: File, target_root: RemoteEntry, configured_path: str) -> TargetResolution:
    """
    Resolve the effective target of a rule.

    When the configured target path is a directory, the source file keeps its
    own name inside it. Otherwise the configured path is the target.
    """
    if isinstance(target_root, Directory):
        effective_path = f"{configured_path.rstrip('/')}/{source.name}"
        entry = target_root.find(effective_path)
        return TargetResolution(effective_path, ABSENT if entry is None else entry)
    return TargetResolution(configured_path, target_root)
