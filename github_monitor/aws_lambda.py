"""AWS Lambda entry point for API Gateway proxy integrations.

``handler`` adapts an API Gateway proxy event into a
``PushNotificationHandler.handle`` call. Each invocation runs its own event
loop, so the httpx client lives for one invocation; the settings and SNS client
are built on cold start and reused. Counters are per invocation and leave the
function as one ``invocation_metrics`` log line.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
from functools import lru_cache
from typing import Any

import httpx
import structlog

from github_monitor.config import Settings, get_settings
from github_monitor.dependencies import retry_policy_from
from github_monitor.logging_config import configure_logging
from github_monitor.metrics import WebhookMetrics
from github_monitor.schemas.webhooks import WebhookResult
from github_monitor.services.github_client import GitHubCommitClient
from github_monitor.services.notifier import NotificationPublisher, SnsPublisher
from github_monitor.services.push_handler import PushNotificationHandler

logger = structlog.get_logger()


def raw_body(event: dict[str, Any]) -> bytes:
    """Return the request body bytes exactly as API Gateway received them."""
    body = event.get("body") or ""
    is_b64 = event.get("isBase64Encoded", False)
    if isinstance(is_b64, str):
        is_b64 = is_b64.lower() == "true"
    if is_b64:
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("lambda_body_base64_invalid")
            return b""
    return body.encode("utf-8")


def lowercase_headers(event: dict[str, Any]) -> dict[str, str]:
    source = event.get("headers") or {}
    return {str(key).lower(): str(value) for key, value in source.items()}


def to_proxy_response(result: WebhookResult) -> dict[str, Any]:
    return {
        "statusCode": result.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(result.content),
    }


async def handle_event(
    event: dict[str, Any],
    *,
    settings: Settings,
    publisher: NotificationPublisher,
    metrics: WebhookMetrics,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Process one API Gateway proxy event and return the proxy response."""
    async with httpx.AsyncClient(
        timeout=settings.github_timeout_seconds, transport=transport
    ) as client:
        commit_client = GitHubCommitClient(
            client,
            environment=settings.environment,
            token=settings.github_token,
            timeout=settings.github_timeout_seconds,
            retry_policy=retry_policy_from(settings),
        )
        push_handler = PushNotificationHandler(settings, commit_client, publisher, metrics)
        result = await push_handler.handle(raw_body(event), lowercase_headers(event))
    logger.info("invocation_metrics", metrics=metrics.snapshot())
    return to_proxy_response(result)


@lru_cache
def _cold_start() -> tuple[Settings, NotificationPublisher]:
    settings = get_settings()
    configure_logging(
        json_logs=not settings.debug,
        log_level=settings.log_level,
        environment=settings.environment,
    )
    publisher = SnsPublisher(settings.sns_topic_arn, settings.aws_region)
    return settings, publisher


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler; configuration errors surface on the first invocation."""
    settings, publisher = _cold_start()
    return asyncio.run(
        handle_event(event, settings=settings, publisher=publisher, metrics=WebhookMetrics())
    )
