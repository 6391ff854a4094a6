"""Write the new content and open the pull request."""

from gh import GitHubClient, PullRequest

from .log import get_logger

logger = get_logger(__name__)

BOT_NAME = "sporkfed[bot]"


def commit_message(target_path: str, is_create: bool) -> str:
    """Commit message and pull request title for a write to ``target_path``."""
    verb = "create" if is_create else "update"
    return f"{BOT_NAME} {verb} file at '{target_path}'"


def normalize_content(raw_content: str) -> str:
    """Drop the line breaks the contents API puts into base64 bodies."""
    return "".join(raw_content.split())


async def write_and_propose(
    client: GitHubClient,
    owner: str,
    repo: str,
    branch: str,
    default_branch: str,
    target_path: str,
    content: str,
    existing_identity: str | None,
    is_create: bool,
) -> PullRequest | None:
    """
    Commit ``content`` to ``target_path`` on ``branch`` and open a pull request.

    Each step runs even when an earlier one failed; nothing is rolled back.
    Open pull requests for the same branch pair are only logged, a new one
    is always requested and GitHub decides whether it is a duplicate.

    Args:
        client: GitHub API client
        owner: Target repository owner
        repo: Target repository name
        branch: Sync branch
        default_branch: Branch the pull request merges into
        target_path: File path to write
        content: Base64 encoded file body
        existing_identity: Blob sha being replaced, None when creating
        is_create: Whether the file is new

    Returns:
        The created pull request, or None if it could not be created
    """
    message = commit_message(target_path, is_create)

    try:
        result = await client.create_or_update_file_contents(
            owner,
            repo,
            target_path,
            content=normalize_content(content),
            message=message,
            branch=branch,
            sha=None if is_create else existing_identity,
        )
    except Exception as e:
        logger.error("update_target_content_error", path=target_path, branch=branch, err=str(e))
    else:
        logger.info(
            "update_target_content", path=target_path, branch=branch, commit=result.commit.sha
        )

    try:
        open_pulls = await client.list_pull_requests(
            owner, repo, state="open", base=default_branch, head=f"{owner}:{branch}"
        )
    except Exception as e:
        logger.warning("list_pull_requests_error", branch=branch, err=str(e))
    else:
        logger.info(
            "list_pull_requests",
            branch=branch,
            open_pull_requests=[pull.number for pull in open_pulls],
        )

    try:
        pull = await client.create_pull_request(
            owner, repo, title=message, base=default_branch, head=branch
        )
    except Exception as e:
        logger.error("create_pull_request_error", branch=branch, base=default_branch, err=str(e))
        return None

    logger.info("create_pull_request", number=pull.number, url=pull.html_url)
    return pull
