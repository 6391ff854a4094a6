"""Fetch and classify a single remote path."""

from dataclasses import replace

from gh import GitHubClient

from .entries import ABSENT, Absent, File, RemoteEntry, classify
from .log import get_logger

logger = get_logger(__name__)


async def fetch_entry(
    client: GitHubClient,
    label: str,
    owner: str,
    repo: str,
    path: str,
    ref: str | None = None,
) -> RemoteEntry:
    """
    Fetch the entry at a path and classify it.

    A missing path and a failed request both come back as Absent: either way
    there is nothing at the path worth preserving.

    Args:
        client: GitHub API client
        label: Which side is fetched, "source" or "target"
        owner: Repository owner
        repo: Repository name
        path: Path in the repository
        ref: Branch/tag/commit (default branch when omitted)
    """
    try:
        raw = await client.get_contents(owner, repo, path, ref)
    except Exception as e:
        logger.error(
            "fetch_file_contents_error",
            target=label,
            repo=f"{owner}/{repo}",
            path=path,
            ref=ref,
            err=str(e),
        )
        return ABSENT

    entry = classify(raw, path)
    logger.info(
        "fetch_file_contents_success",
        target=label,
        repo=f"{owner}/{repo}",
        path=path,
        ref=ref,
        kind=entry.kind,
    )
    if isinstance(entry, Absent):
        logger.warning("unknown_file_type", target=label, path=path, type=getattr(raw, "type", None))
    return entry


async def load_body(client: GitHubClient, owner: str, repo: str, file: File) -> File | None:
    """
    Fill in the body the contents API leaves out of files over 1 MB.

    Returns:
        The file with its body, or None if the blob could not be read
    """
    if not file.body_omitted:
        return file
    try:
        blob = await client.get_blob(owner, repo, file.content_identity)
    except Exception as e:
        logger.error(
            "fetch_blob_error",
            repo=f"{owner}/{repo}",
            path=file.path,
            sha=file.content_identity,
            err=str(e),
        )
        return None
    logger.info("fetch_blob_success", repo=f"{owner}/{repo}", path=file.path, size=blob.size)
    return replace(file, raw_content=blob.content)
