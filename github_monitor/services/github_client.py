"""GitHub REST API client for fetching the file changes of a single commit."""

from __future__ import annotations

import asyncio
from urllib.parse import quote

import httpx
import structlog

from github_monitor.errors import UpstreamFetchError
from github_monitor.schemas.github import CommitDiff
from github_monitor.services.retry import RetryPolicy, SleepFunc

logger = structlog.get_logger()

GITHUB_API_BASE = "https://api.github.com"

_GITHUB_HEADERS_BASE = {
    "Accept": "application/vnd.github.v3+json",
}


def _request_headers(environment: str, token: str) -> dict[str, str]:
    """Build GitHub API headers; adds Bearer auth only when a token is set."""
    headers = {**_GITHUB_HEADERS_BASE, "User-Agent": f"GitHub-Monitor/{environment}"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def fetch_commit(
    client: httpx.AsyncClient,
    repository: str,
    sha: str,
    *,
    environment: str,
    token: str = "",
    timeout: float = 10.0,
) -> CommitDiff:
    """Fetch one commit from GitHub, in a single attempt.

    Args:
        client: Shared httpx async client (for connection pooling).
        repository: ``owner/repo`` identifier.
        sha: Commit SHA.
        environment: Deployment label, sent in the User-Agent.
        token: Optional GitHub token; public repositories need none.
        timeout: Request timeout in seconds.

    Raises:
        UpstreamFetchError: On transport failure, non-2xx status or a body
            that is not JSON.
    """
    # ids come from the payload; escape anything that is not a plain path segment
    path = f"/repos/{quote(repository, safe='/')}/commits/{quote(sha, safe='')}"
    url = GITHUB_API_BASE + path
    try:
        resp = await client.get(url, headers=_request_headers(environment, token), timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise UpstreamFetchError(f"HTTPS request failed: {exc}") from exc

    if not resp.is_success:
        raise UpstreamFetchError(
            f"GitHub API error: {resp.status_code}", status_code=resp.status_code
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamFetchError("Failed to parse GitHub API response") from exc
    return CommitDiff.from_api(data)


class GitHubCommitClient:
    """Commit-diff fetcher with bounded retry.

    The underlying ``httpx.AsyncClient`` is owned by the caller so one
    connection pool can be shared across requests.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        environment: str,
        token: str = "",
        timeout: float = 10.0,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._client = client
        self._environment = environment
        self._token = token
        self._timeout = timeout
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    async def fetch_commit_diff(self, repository: str, sha: str) -> CommitDiff:
        """Fetch a commit's file changes, retrying on any fetch failure.

        Raises:
            UpstreamFetchError: The error from the final attempt.
        """

        async def attempt() -> CommitDiff:
            return await fetch_commit(
                self._client,
                repository,
                sha,
                environment=self._environment,
                token=self._token,
                timeout=self._timeout,
            )

        logger.info("fetching_commit_diff", repository=repository, sha=sha)
        return await self._retry_policy.run(
            attempt, retry_on=(UpstreamFetchError,), sleep=self._sleep
        )
