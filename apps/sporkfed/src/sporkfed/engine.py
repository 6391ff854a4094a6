"""Rule evaluation and push handling."""

import asyncio
from dataclasses import dataclass
from enum import Enum

from gh import GitHubClient, PullRequest

from .branches import reset_branch, sync_branch_name
from .config import DEFAULT_CONFIG_PATH, load_config
from .decision import SyncAction, decide
from .entries import Absent, File
from .exceptions import BranchResetError
from .fetcher import fetch_entry, load_body
from .log import get_logger
from .models import PushEvent, Rule
from .proposal import write_and_propose
from .resolver import resolve_target

logger = get_logger(__name__)


class RuleOutcome(str, Enum):
    SOURCE_NOT_FOUND = "source_not_found"
    UNSUPPORTED_SOURCE = "unsupported_source"
    SOURCE_UNREADABLE = "source_unreadable"
    UNSUPPORTED_TARGET = "unsupported_target"
    NO_CHANGES = "no_changes"
    PROPOSED = "proposed"
    PROPOSAL_FAILED = "proposal_failed"
    FAILED = "failed"


@dataclass
class RuleResult:
    """What happened to one rule."""

    rule: Rule
    outcome: RuleOutcome
    target_path: str | None = None
    pull_request: PullRequest | None = None


class Reconciler:
    """Drives one repository's targets toward their upstream files."""

    def __init__(self, client: GitHubClient, owner: str, repo: str, default_branch: str):
        self.client = client
        self.owner = owner
        self.repo = repo
        self.default_branch = default_branch

    async def reconcile(self, rule: Rule) -> RuleResult:
        """Evaluate a single rule and open a pull request if the target is stale."""
        rule_desc = rule.describe()
        source = await fetch_entry(
            self.client,
            "source",
            rule.repo_owner,
            rule.repo_name,
            rule.upstream.path,
            rule.upstream.branch,
        )
        if isinstance(source, Absent):
            logger.warning("source_path_not_found", rule=rule_desc)
            return RuleResult(rule, RuleOutcome.SOURCE_NOT_FOUND)
        if not isinstance(source, File):
            logger.warning("unsupported_source_type", rule=rule_desc, type=source.kind)
            return RuleResult(rule, RuleOutcome.UNSUPPORTED_SOURCE)

        target_root = await fetch_entry(
            self.client, "target", self.owner, self.repo, rule.target.path, rule.target.branch
        )
        resolution = resolve_target(source, target_root, rule.target.path)
        target_path = resolution.effective_path
        decision = decide(source, resolution.effective_entry)

        if decision.action is SyncAction.REJECT:
            logger.warning(
                "unsupported_target_type",
                rule=rule_desc,
                path=target_path,
                type=resolution.effective_entry.kind,
            )
            return RuleResult(rule, RuleOutcome.UNSUPPORTED_TARGET, target_path)
        if decision.action is SyncAction.NOOP:
            logger.info("ignore_no_changes", rule=rule_desc, path=target_path)
            return RuleResult(rule, RuleOutcome.NO_CHANGES, target_path)

        # Only now is the body needed; large files cost an extra request
        source = await load_body(self.client, rule.repo_owner, rule.repo_name, source)
        if source is None:
            return RuleResult(rule, RuleOutcome.SOURCE_UNREADABLE, target_path)

        logger.info("sync_target", rule=rule_desc, path=target_path, reason=decision.reason)
        branch = sync_branch_name(target_path)
        await reset_branch(self.client, self.owner, self.repo, branch, self.default_branch)
        pull = await write_and_propose(
            self.client,
            self.owner,
            self.repo,
            branch,
            self.default_branch,
            target_path,
            source.raw_content,
            resolution.effective_entry.identity,
            is_create=decision.action is SyncAction.CREATE,
        )
        outcome = RuleOutcome.PROPOSED if pull is not None else RuleOutcome.PROPOSAL_FAILED
        return RuleResult(rule, outcome, target_path, pull)

    async def _reconcile_isolated(self, rule: Rule) -> RuleResult:
        try:
            return await self.reconcile(rule)
        except BranchResetError as e:
            logger.error("skip_rule", rule=rule.describe(), err=str(e))
        except Exception as e:
            logger.error("rule_error", rule=rule.describe(), err=str(e), exc_info=True)
        return RuleResult(rule, RuleOutcome.FAILED)

    async def reconcile_all(self, rules: list[Rule]) -> list[RuleResult]:
        """Evaluate every rule concurrently; one rule failing leaves the others alone."""
        return list(await asyncio.gather(*(self._reconcile_isolated(rule) for rule in rules)))


async def handle_push(
    client: GitHubClient,
    event: PushEvent,
    config_path: str = DEFAULT_CONFIG_PATH,
) -> list[RuleResult]:
    """
    Handle a push event.

    Only pushes of a head commit to the default branch are acted on. Rules
    are read from the pushed repository and all run concurrently.
    """
    default_branch = event.default_branch
    if event.ref != f"refs/heads/{default_branch}":
        logger.info("ignore_non_default_branch", ref=event.ref, default_branch=default_branch)
        return []

    if not event.head_commit:
        logger.info("ignore_no_head_commit", ref=event.ref, after_commit_id=event.after)
        return []

    try:
        config = await load_config(client, event.owner, event.repo, config_path)
    except Exception as e:
        logger.error(
            "load_config_error", repo=f"{event.owner}/{event.repo}", path=config_path, err=str(e)
        )
        return []

    reconciler = Reconciler(client, event.owner, event.repo, default_branch)
    return await reconciler.reconcile_all(config.rules)
