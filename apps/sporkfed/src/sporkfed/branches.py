"""Sync branch management."""

from gh import GitHubClient

from .exceptions import BranchResetError
from .log import get_logger

logger = get_logger(__name__)

SYNC_BRANCH_PREFIX = "sporkfed/"


def sync_branch_name(target_path: str) -> str:
    """Name of the disposable branch staging a write to ``target_path``."""
    return f"{SYNC_BRANCH_PREFIX}{target_path}"


async def reset_branch(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    default_branch: str,
) -> str:
    """
    Recreate ``branch`` at the tip of ``default_branch``.

    Any previous branch of the same name is deleted first, together with any
    commits pushed to it since it was opened. A missing branch is fine.

    Returns:
        Sha of the commit the branch now points at

    Raises:
        BranchResetError: The default branch tip could not be read
    """
    try:
        await client.delete_ref(owner, repo, f"heads/{branch}")
    except Exception as e:
        logger.error("delete_branch_error", branch=branch, err=str(e))

    try:
        default_ref = await client.get_ref(owner, repo, f"heads/{default_branch}")
    except Exception as e:
        logger.error(
            "create_branch_error", branch=branch, default_branch=default_branch, err=str(e)
        )
        raise BranchResetError(
            f"Cannot read heads/{default_branch} in {owner}/{repo}"
        ) from e

    sha = default_ref.object.sha
    try:
        await client.create_ref(owner, repo, f"refs/heads/{branch}", sha)
    except Exception as e:
        logger.error("create_branch_error", branch=branch, sha=sha, err=str(e))
    else:
        logger.info("reset_branch", branch=branch, default_branch=default_branch, sha=sha)
    return sha
