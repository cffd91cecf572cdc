"""Shared test fixtures: settings, fake GitHub API, publisher and test client."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from github_monitor.config import Settings, get_settings, load_settings
from github_monitor.dependencies import get_commit_client, get_metrics, get_publisher
from github_monitor.main import app
from github_monitor.metrics import WebhookMetrics
from github_monitor.services.github_client import GitHubCommitClient
from github_monitor.services.notifier import InMemoryPublisher
from github_monitor.services.retry import RetryPolicy
from tests.helpers import (
    TARGET_REPOSITORY,
    TOPIC_ARN,
    WEBHOOK_SECRET,
    FakeGitHub,
    SleepRecorder,
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return load_settings(
        _env_file=None,
        github_repository=TARGET_REPOSITORY,
        github_webhook_secret=WEBHOOK_SECRET,
        sns_topic_arn=TOPIC_ARN,
        environment="test",
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def mock_publisher() -> InMemoryPublisher:
    """Create a fresh in-memory publisher for test inspection."""
    return InMemoryPublisher()


@pytest.fixture
def metrics() -> WebhookMetrics:
    return WebhookMetrics()


@pytest.fixture
async def github_http_client(fake_github: FakeGitHub) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_github)) as http_client:
        yield http_client


@pytest.fixture
def commit_client(
    settings: Settings,
    github_http_client: httpx.AsyncClient,
    sleep_recorder: SleepRecorder,
) -> GitHubCommitClient:
    return GitHubCommitClient(
        github_http_client,
        environment=settings.environment,
        retry_policy=RetryPolicy(),
        sleep=sleep_recorder,
    )


@pytest.fixture
async def client(
    settings: Settings,
    commit_client: GitHubCommitClient,
    mock_publisher: InMemoryPublisher,
    metrics: WebhookMetrics,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient against the app with dependencies overridden.

    The GitHub API is served by ``FakeGitHub``, retries record their delays
    instead of sleeping, and notifications land in an in-memory publisher.
    """
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_commit_client] = lambda: commit_client
    app.dependency_overrides[get_publisher] = lambda: mock_publisher
    app.dependency_overrides[get_metrics] = lambda: metrics
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
