"""Mirror upstream files into a repository through pull requests."""

from .config import Settings, load_config
from .decision import SyncAction, SyncDecision, decide
from .engine import Reconciler, RuleOutcome, RuleResult, handle_push
from .entries import ABSENT, Absent, Directory, File, RemoteEntry, Submodule, Symlink, classify
from .models import PushEvent, Rule, SporkfedConfig
from .resolver import TargetResolution, resolve_target

__all__ = [
    "ABSENT",
    "Absent",
    "Directory",
    "File",
    "PushEvent",
    "Reconciler",
    "RemoteEntry",
    "Rule",
    "RuleOutcome",
    "RuleResult",
    "Settings",
    "SporkfedConfig",
    "Submodule",
    "Symlink",
    "SyncAction",
    "SyncDecision",
    "TargetResolution",
    "classify",
    "decide",
    "handle_push",
    "load_config",
    "resolve_target",
]
