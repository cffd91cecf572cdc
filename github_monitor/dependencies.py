"""Centralized FastAPI dependencies for use with Depends()."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from github_monitor.config import Settings, get_settings
from github_monitor.metrics import WebhookMetrics
from github_monitor.services.github_client import GitHubCommitClient
from github_monitor.services.notifier import InMemoryPublisher, NotificationPublisher
from github_monitor.services.push_handler import PushNotificationHandler
from github_monitor.services.retry import RetryPolicy

_publisher: NotificationPublisher = InMemoryPublisher()
_metrics = WebhookMetrics()


def init_production_deps(sns_topic_arn: str, aws_region: str) -> None:
    """Swap the InMemory publisher for the real SNS-backed implementation.

    Uses a lazy import so the module loads without boto3 configured.
    """
    global _publisher  # noqa: PLW0603

    from github_monitor.services.notifier import SnsPublisher

    _publisher = SnsPublisher(sns_topic_arn, aws_region)


def get_publisher() -> NotificationPublisher:
    """Return the application notification publisher.

    Defaults to InMemoryPublisher for development and testing.
    Swapped to SNS by ``init_production_deps()``.
    """
    return _publisher


def get_metrics() -> WebhookMetrics:
    """Return the process-wide metrics collector."""
    return _metrics


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared httpx client created in the application lifespan."""
    return request.app.state.http_client


def retry_policy_from(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.retry_max_attempts,
        base_delay=settings.retry_base_delay,
        multiplier=settings.retry_multiplier,
    )


def get_commit_client(
    settings: Annotated[Settings, Depends(get_settings)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> GitHubCommitClient:
    """Build the commit-diff fetcher from settings and the shared client."""
    return GitHubCommitClient(
        http_client,
        environment=settings.environment,
        token=settings.github_token,
        timeout=settings.github_timeout_seconds,
        retry_policy=retry_policy_from(settings),
    )


def get_push_handler(
    settings: Annotated[Settings, Depends(get_settings)],
    commit_client: Annotated[GitHubCommitClient, Depends(get_commit_client)],
    publisher: Annotated[NotificationPublisher, Depends(get_publisher)],
    metrics: Annotated[WebhookMetrics, Depends(get_metrics)],
) -> PushNotificationHandler:
    """Assemble the webhook orchestrator for one request."""
    return PushNotificationHandler(settings, commit_client, publisher, metrics)


__all__ = [
    "get_commit_client",
    "get_http_client",
    "get_metrics",
    "get_publisher",
    "get_push_handler",
    "get_settings",
    "init_production_deps",
    "retry_policy_from",
]
