"""Webhook orchestration: verify, validate, fetch diff, format and publish.

``PushNotificationHandler`` is transport-agnostic. The FastAPI route and the
Lambda adapter both hand it the raw body and header map and turn the
returned ``WebhookResult`` into their own response type.

Only the final commit of a push is notified; earlier commits are counted but
not fetched. A failed diff fetch degrades to placeholder text so the email
still goes out, and only a failed publish is reported to GitHub as a 5xx.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

import structlog

from github_monitor.config import Settings
from github_monitor.errors import (
    AuthenticationError,
    EventIgnored,
    PayloadValidationError,
    PublishError,
    RepositoryNotAuthorized,
    UpstreamFetchError,
)
from github_monitor.metrics import WebhookMetrics
from github_monitor.schemas.webhooks import WebhookResult
from github_monitor.services.formatting import DIFF_FETCH_ERROR, format_diff, format_notification
from github_monitor.services.github_client import GitHubCommitClient
from github_monitor.services.notifier import NotificationPublisher
from github_monitor.services.signature import verify_signature
from github_monitor.services.validator import get_header, validate_push_event

logger = structlog.get_logger()


def _result(status_code: int, message: str, **extra: object) -> WebhookResult:
    return WebhookResult(status_code=status_code, content={"message": message, **extra})


class PushNotificationHandler:
    """Handle one GitHub webhook delivery end to end."""

    def __init__(
        self,
        settings: Settings,
        commit_client: GitHubCommitClient,
        publisher: NotificationPublisher,
        metrics: WebhookMetrics,
    ) -> None:
        self._settings = settings
        self._commit_client = commit_client
        self._publisher = publisher
        self._metrics = metrics

    async def handle(self, raw_body: bytes, headers: Mapping[str, str]) -> WebhookResult:
        """Process a webhook delivery and return the response to send back."""
        self._metrics.record_received()
        delivery = get_header(headers, "x-github-delivery")
        with structlog.contextvars.bound_contextvars(
            delivery_id=delivery, environment=self._settings.environment
        ):
            try:
                self._authenticate(raw_body, headers)
            except AuthenticationError as exc:
                self._metrics.record_invalid_signature()
                logger.warning("webhook_invalid_signature")
                return _result(401, str(exc))
            return await self._process(raw_body, headers)

    def _authenticate(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        signature = get_header(headers, "x-hub-signature-256")
        if not verify_signature(raw_body, signature, self._settings.github_webhook_secret):
            raise AuthenticationError("Invalid signature")

    async def _process(self, raw_body: bytes, headers: Mapping[str, str]) -> WebhookResult:
        try:
            payload = json.loads(raw_body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("webhook_invalid_json")
            return _result(400, "Invalid JSON body")

        try:
            push = validate_push_event(payload, headers, self._settings.github_repository)
        except EventIgnored as exc:
            self._metrics.record_ignored("event_type")
            logger.info("webhook_event_ignored", detail=exc.message)
            return _result(exc.status_code, exc.message)
        except RepositoryNotAuthorized as exc:
            self._metrics.record_ignored("repository")
            logger.warning("webhook_repository_not_authorized")
            return _result(exc.status_code, exc.message)
        except PayloadValidationError as exc:
            logger.warning("webhook_malformed_payload", detail=exc.message)
            return _result(exc.status_code, exc.message)

        commit = push.final_commit
        if commit is None:
            self._metrics.record_ignored("no_commits")
            logger.info("webhook_no_commits", ref=push.ref)
            return _result(200, "No commits to process", total_commits=0)

        total_commits = len(push.commits)
        repository = push.repository.full_name
        logger.info("processing_commit", commit_id=commit.id, total_commits=total_commits)

        try:
            diff = await self._commit_client.fetch_commit_diff(repository, commit.id)
        except UpstreamFetchError as exc:
            self._metrics.record_diff_fetch(success=False)
            logger.error("diff_fetch_failed", commit_id=commit.id, error=str(exc))
            diff_text = DIFF_FETCH_ERROR
        else:
            self._metrics.record_diff_fetch(success=True)
            diff_text = format_diff(
                diff.files,
                max_files=self._settings.diff_max_files,
                max_patch_chars=self._settings.diff_max_patch_chars,
            )

        notification = format_notification(
            repository=repository,
            environment=self._settings.environment,
            commit=commit,
            total_commits=total_commits,
            diff_text=diff_text,
        )

        try:
            message_id = await self._publisher.publish(notification.subject, notification.message)
        except PublishError as exc:
            self._metrics.record_notification(success=False)
            logger.error("notification_publish_failed", commit_id=commit.id, error=str(exc))
            return _result(500, "Failed to send notification", processed_commit=commit.id)

        self._metrics.record_notification(success=True)
        logger.info("notification_published", commit_id=commit.id, message_id=message_id)
        return _result(
            200,
            "Webhook processed successfully",
            total_commits=total_commits,
            processed_commit=commit.id,
        )
