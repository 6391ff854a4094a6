"""GitHub API client."""

import base64
import logging
import os
import subprocess
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .models import FileCommit, GitBlob, GitHubContent, GitHubFile, GitRef, PullRequest

logger = logging.getLogger(__name__)

# Retry configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

# Retryable exceptions
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.NetworkError,
)


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token(token: str | None = None, use_gh_cli: bool = False) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    # Try gh cli only if explicitly allowed
    if use_gh_cli:
        return get_token_from_gh_cli()

    return None


def is_not_found(error: BaseException) -> bool:
    """Check whether an error is a 404 from the GitHub API."""
    return isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 404


def create_retry_decorator(max_retries: int = DEFAULT_MAX_RETRIES):
    """Create a retry decorator with specified max retries."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=1, min=DEFAULT_MIN_WAIT, max=DEFAULT_MAX_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class GitHubClient:
    """Async GitHub REST API client with retry support."""

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        use_gh_cli: bool = False,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (optional)
            base_url: Custom base URL (defaults to GitHub API)
            timeout: Request timeout in seconds
            use_gh_cli: Use gh cli credentials (requires user consent)
            max_retries: Maximum number of retry attempts (default: 3)
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "sporkfed-github-client",
        }

        resolved_token = get_token(token, use_gh_cli=use_gh_cli)

        if resolved_token:
            self.headers["Authorization"] = f"token {resolved_token}"
            logger.debug("GitHub client initialized with token")
        else:
            logger.warning("GitHub client initialized without token (rate limited)")
        logger.info("GitHub client ready, base_url=%s, max_retries=%d", self.base_url, max_retries)

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers=self.headers, transport=self.transport
        )

    async def _request(
        self, method: str, endpoint: str, **kwargs: Any
    ) -> httpx.Response:
        """Make HTTP request to GitHub API with retry."""
        url = f"{self.base_url}{endpoint}"

        @create_retry_decorator(self.max_retries)
        async def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, url)
            async with self._http() as client:
                response = await client.request(method, url, **kwargs)
                logger.debug(
                    "Response: %s %s (status=%d)",
                    method,
                    endpoint,
                    response.status_code,
                )
                if response.status_code >= 500:
                    logger.warning("Server error %d", response.status_code)
                    raise httpx.HTTPStatusError(
                        f"Server error {response.status_code}",
                        request=response.request,
                        response=response,
                    )
                response.raise_for_status()
                return response

        return await do_request()

    async def _download(self, url: str) -> str:
        """Download content from URL with retry."""
        @create_retry_decorator(self.max_retries)
        async def do_download() -> str:
            logger.debug("Downloading: %s", url)
            async with self._http() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text

        return await do_download()

    async def get_contents(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> GitHubContent | list[GitHubContent]:
        """
        Get repository contents at a path.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Path in repository (empty for root)
            ref: Branch/tag/commit (default branch when omitted)

        Returns:
            A single GitHubContent for a file, symlink or submodule,
            or a list of GitHubContent for a directory
        """
        endpoint = f"/repos/{owner}/{repo}/contents/{path}"
        params = {"ref": ref} if ref else {}
        logger.info("Fetching contents: %s/%s path=%s ref=%s", owner, repo, path, ref)
        response = await self._request("GET", endpoint, params=params)
        data = response.json()

        if isinstance(data, dict):
            logger.debug("Single item response: %s (%s)", data.get("name"), data.get("type"))
            return GitHubContent(**data)

        logger.debug("Directory listing: %d items", len(data))
        return [GitHubContent(**item) for item in data]

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> GitHubFile:
        """
        Get file content with decoded text.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            ref: Branch/tag/commit (default branch when omitted)

        Returns:
            GitHubFile with decoded content
        """
        logger.info("Fetching file content: %s/%s path=%s", owner, repo, path)
        content_item = await self.get_contents(owner, repo, path, ref)
        if isinstance(content_item, list) or content_item.type != "file":
            logger.error("Path is not a file: %s", path)
            raise ValueError(f"Path is not a file: {path}")

        if content_item.content:
            logger.debug("Decoding base64 content for: %s", path)
            decoded = base64.b64decode(content_item.content).decode("utf-8")
        elif content_item.download_url:
            # Files over 1MB come back without inline content
            decoded = await self._download(content_item.download_url)
        else:
            decoded = ""

        logger.debug("File content fetched: %s (%d bytes)", path, len(decoded))

        return GitHubFile(
            name=content_item.name,
            path=content_item.path,
            sha=content_item.sha,
            size=content_item.size,
            html_url=content_item.html_url,
            content=decoded,
        )

    async def get_blob(self, owner: str, repo: str, sha: str) -> GitBlob:
        """
        Get a git blob by sha.

        Unlike the contents API this returns the body of files over 1MB.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Blob sha
        """
        logger.info("Fetching blob: %s/%s sha=%s", owner, repo, sha)
        response = await self._request("GET", f"/repos/{owner}/{repo}/git/blobs/{sha}")
        return GitBlob(**response.json())

    async def get_ref(self, owner: str, repo: str, ref: str) -> GitRef:
        """
        Get a git reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Reference without the "refs/" prefix, e.g. "heads/main"
        """
        logger.info("Fetching ref: %s/%s ref=%s", owner, repo, ref)
        response = await self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")
        return GitRef(**response.json())

    async def delete_ref(self, owner: str, repo: str, ref: str) -> None:
        """Delete a git reference such as "heads/feature"."""
        logger.info("Deleting ref: %s/%s ref=%s", owner, repo, ref)
        await self._request("DELETE", f"/repos/{owner}/{repo}/git/refs/{ref}")

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> GitRef:
        """
        Create a git reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Fully qualified reference, e.g. "refs/heads/feature"
            sha: Commit the reference points at
        """
        logger.info("Creating ref: %s/%s ref=%s sha=%s", owner, repo, ref, sha)
        response = await self._request(
            "POST", f"/repos/{owner}/{repo}/git/refs", json={"ref": ref, "sha": sha}
        )
        return GitRef(**response.json())

    async def create_or_update_file_contents(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> FileCommit:
        """
        Create or replace a file on a branch.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            content: Base64 encoded file body
            message: Commit message
            branch: Branch to commit to
            sha: Blob sha of the file being replaced (omit when creating)

        Returns:
            FileCommit with the new content and commit
        """
        payload: dict[str, Any] = {"message": message, "content": content, "branch": branch}
        if sha is not None:
            payload["sha"] = sha
        logger.info("Writing file: %s/%s path=%s branch=%s", owner, repo, path, branch)
        response = await self._request(
            "PUT", f"/repos/{owner}/{repo}/contents/{path}", json=payload
        )
        return FileCommit(**response.json())

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        base: str | None = None,
        head: str | None = None,
    ) -> list[PullRequest]:
        """
        List pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            state: "open", "closed" or "all"
            base: Filter by base branch name
            head: Filter by head in "owner:branch" form
        """
        params = {"state": state}
        if base:
            params["base"] = base
        if head:
            params["head"] = head
        logger.info("Listing pull requests: %s/%s %s", owner, repo, params)
        response = await self._request("GET", f"/repos/{owner}/{repo}/pulls", params=params)
        return [PullRequest(**item) for item in response.json()]

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        base: str,
        head: str,
        body: str | None = None,
    ) -> PullRequest:
        """Open a pull request from head into base."""
        payload = {"title": title, "base": base, "head": head}
        if body is not None:
            payload["body"] = body
        logger.info("Creating pull request: %s/%s %s -> %s", owner, repo, head, base)
        response = await self._request("POST", f"/repos/{owner}/{repo}/pulls", json=payload)
        return PullRequest(**response.json())
