"""In-memory stand-in for gh.GitHubClient."""

import base64

import httpx

from gh import (
    Commit,
    FileCommit,
    GitBlob,
    GitHubContent,
    GitHubFile,
    GitObject,
    GitRef,
    PullRequest,
    PullRequestRef,
)


def http_error(status: int, method: str, url: str) -> httpx.HTTPStatusError:
    request = httpx.Request(method, f"https://api.github.com{url}")
    response = httpx.Response(status, request=request, json={"message": "error"})
    return httpx.HTTPStatusError(f"{status}", request=request, response=response)


def file_item(path: str, sha: str, text: str = "hello\n") -> GitHubContent:
    return GitHubContent(
        name=path.rsplit("/", 1)[-1],
        path=path,
        sha=sha,
        size=len(text),
        type="file",
        content=base64.b64encode(text.encode()).decode(),
        encoding="base64",
    )


def item(path: str, sha: str, type_: str) -> GitHubContent:
    return GitHubContent(name=path.rsplit("/", 1)[-1], path=path, sha=sha, type=type_)


def large_file_item(path: str, sha: str, size: int = 2_000_000) -> GitHubContent:
    """Contents API answer for a file over 1 MB: no inline body."""
    return GitHubContent(
        name=path.rsplit("/", 1)[-1], path=path, sha=sha, size=size, type="file",
        content="", encoding="none",
    )


class FakeGitHubClient:
    """Records every call; repository state lives in plain dicts."""

    def __init__(self):
        # (owner, repo, path, ref) -> content item or directory listing
        self.contents: dict[tuple[str, str, str, str | None], GitHubContent | list[GitHubContent]] = {}
        # (owner, repo, "heads/<name>") -> sha
        self.refs: dict[tuple[str, str, str], str] = {}
        # (owner, repo, sha) -> base64 body
        self.blobs: dict[tuple[str, str, str], str] = {}
        self.pulls: list[PullRequest] = []
        self.writes: list[dict] = []
        self.calls: list[tuple] = []
        # method name -> exception raised instead of doing the call
        self.failures: dict[str, Exception] = {}

    def add(self, owner: str, repo: str, content, ref: str | None = None, path: str | None = None):
        path = path if path is not None else content.path
        self.contents[(owner, repo, path, ref)] = content

    def set_config(self, owner: str, repo: str, text: str, path: str = ".github/sporkfed.yml"):
        self.add(owner, repo, file_item(path, "cfg", text))

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    @property
    def mutating_calls(self) -> list[tuple]:
        mutating = {"delete_ref", "create_ref", "create_or_update_file_contents", "create_pull_request"}
        return [call for call in self.calls if call[0] in mutating]

    def _enter(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    async def get_contents(self, owner, repo, path="", ref=None):
        self._enter("get_contents", owner, repo, path, ref)
        try:
            return self.contents[(owner, repo, path, ref)]
        except KeyError:
            raise http_error(404, "GET", f"/repos/{owner}/{repo}/contents/{path}") from None

    async def get_file_content(self, owner, repo, path, ref=None):
        self._enter("get_file_content", owner, repo, path, ref)
        try:
            content = self.contents[(owner, repo, path, ref)]
        except KeyError:
            raise http_error(404, "GET", f"/repos/{owner}/{repo}/contents/{path}") from None
        if isinstance(content, list) or content.type != "file":
            raise ValueError(f"Path is not a file: {path}")
        return GitHubFile(
            name=content.name,
            path=content.path,
            sha=content.sha,
            size=content.size,
            content=base64.b64decode(content.content or "").decode(),
        )

    async def get_blob(self, owner, repo, sha):
        self._enter("get_blob", owner, repo, sha)
        try:
            content = self.blobs[(owner, repo, sha)]
        except KeyError:
            raise http_error(404, "GET", f"/repos/{owner}/{repo}/git/blobs/{sha}") from None
        return GitBlob(sha=sha, size=len(base64.b64decode(content)), content=content)

    async def get_ref(self, owner, repo, ref):
        self._enter("get_ref", owner, repo, ref)
        try:
            sha = self.refs[(owner, repo, ref)]
        except KeyError:
            raise http_error(404, "GET", f"/repos/{owner}/{repo}/git/ref/{ref}") from None
        return GitRef(ref=f"refs/{ref}", object=GitObject(sha=sha))

    async def delete_ref(self, owner, repo, ref):
        self._enter("delete_ref", owner, repo, ref)
        if (owner, repo, ref) not in self.refs:
            raise http_error(422, "DELETE", f"/repos/{owner}/{repo}/git/refs/{ref}")
        del self.refs[(owner, repo, ref)]

    async def create_ref(self, owner, repo, ref, sha):
        self._enter("create_ref", owner, repo, ref, sha)
        key = (owner, repo, ref.removeprefix("refs/"))
        if key in self.refs:
            raise http_error(422, "POST", f"/repos/{owner}/{repo}/git/refs")
        self.refs[key] = sha
        return GitRef(ref=ref, object=GitObject(sha=sha))

    async def create_or_update_file_contents(self, owner, repo, path, content, message, branch, sha=None):
        self._enter("create_or_update_file_contents", owner, repo, path, branch)
        self.writes.append(
            {"owner": owner, "repo": repo, "path": path, "content": content,
             "message": message, "branch": branch, "sha": sha}
        )
        return FileCommit(commit=Commit(sha=f"commit-{len(self.writes)}", message=message))

    async def list_pull_requests(self, owner, repo, state="open", base=None, head=None):
        self._enter("list_pull_requests", owner, repo, state, base, head)
        branch = head.split(":", 1)[-1] if head else None
        return [
            pull for pull in self.pulls
            if pull.state == state and (base is None or pull.base.ref == base)
            and (branch is None or pull.head.ref == branch)
        ]

    async def create_pull_request(self, owner, repo, title, base, head, body=None):
        self._enter("create_pull_request", owner, repo, title, base, head)
        pull = PullRequest(
            number=len(self.pulls) + 1,
            title=title,
            html_url=f"https://github.com/{owner}/{repo}/pull/{len(self.pulls) + 1}",
            head=PullRequestRef(ref=head),
            base=PullRequestRef(ref=base),
        )
        self.pulls.append(pull)
        return pull
