"""Payload builders, signing and fakes shared by the test modules."""

import hashlib
import hmac
import json
from collections.abc import Callable

import httpx

WEBHOOK_SECRET = "test-secret"
TARGET_REPOSITORY = "testuser/my-repo"
TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:github-monitor"


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Compute the GitHub-style HMAC-SHA256 signature for a payload."""
    digest = hmac.new(
        secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"sha256={digest}"


def make_commit(index: int = 0, **overrides: object) -> dict:
    commit = {
        "id": f"abc{index:04d}",
        "message": f"commit {index}",
        "timestamp": "2026-02-07T12:00:00Z",
        "url": f"https://github.com/{TARGET_REPOSITORY}/commit/abc{index:04d}",
        "author": {"name": "Test User", "email": "test@example.com"},
    }
    commit.update(overrides)
    return commit


def make_push_payload(*, num_commits: int = 1, full_name: str = TARGET_REPOSITORY) -> dict:
    """Build a realistic GitHub push webhook payload."""
    commits = [make_commit(i) for i in range(num_commits)]
    return {
        "ref": "refs/heads/main",
        "before": "0000000000000000000000000000000000000000",
        "after": commits[-1]["id"] if commits else "0" * 40,
        "repository": {
            "id": 12345,
            "name": full_name.split("/")[-1],
            "full_name": full_name,
            "owner": {"login": "testuser", "name": "Test User"},
        },
        "commits": commits,
    }


def webhook_request(payload: dict, *, event: str = "push", secret: str = WEBHOOK_SECRET) -> dict:
    """Keyword arguments for ``client.post`` delivering a signed webhook."""
    body = json.dumps(payload).encode()
    return {
        "content": body,
        "headers": {
            "Content-Type": "application/json",
            "X-GitHub-Event": event,
            "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
            "X-Hub-Signature-256": sign(body, secret),
        },
    }


def commit_response(*filenames: str, patch: str = "@@ -1 +1 @@\n-old\n+new") -> dict:
    return {
        "sha": "abc0000",
        "files": [
            {
                "filename": name,
                "status": "modified",
                "additions": 1,
                "deletions": 1,
                "patch": patch,
            }
            for name in filenames
        ],
    }


class FakeGitHub:
    """Callable for ``httpx.MockTransport`` that records GitHub API requests."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json=commit_response("src/app.py")
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


