"""Notification publisher abstraction with protocol-based swappable implementations.

Production code uses ``SnsPublisher`` which wraps the synchronous boto3 SNS
client in ``asyncio.to_thread`` so it never blocks the event loop; the SNS
topic's email subscriptions fan the message out. Tests use
``InMemoryPublisher`` which captures published messages for assertion without
AWS credentials.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import structlog

from github_monitor.errors import PublishError

logger = structlog.get_logger()

# SNS rejects subjects longer than 100 characters.
SNS_SUBJECT_MAX_LENGTH = 100


class NotificationPublisher(Protocol):
    """Protocol for publishing a subject/message pair to a topic."""

    async def publish(self, subject: str, message: str) -> str:
        """Publish one notification.

        Returns the message identifier assigned by the topic.
        """
        ...


def _sns_subject(subject: str) -> str:
    # SNS subjects must not contain line breaks
    flat = " ".join(subject.split())
    if len(flat) <= SNS_SUBJECT_MAX_LENGTH:
        return flat
    return flat[: SNS_SUBJECT_MAX_LENGTH - 3] + "..."


class SnsPublisher:
    """Production implementation backed by an AWS SNS topic.

    boto3 is imported lazily so the module can be loaded without the AWS SDK
    configured. A pre-built client may be passed in, e.g. one wrapped by a
    botocore ``Stubber`` in tests.
    """

    def __init__(self, topic_arn: str, region: str = "", client: Any = None) -> None:
        if client is None:
            import boto3

            client = boto3.client("sns", region_name=region or None)
        self._client = client
        self._topic_arn = topic_arn

    async def publish(self, subject: str, message: str) -> str:
        """Publish to the topic and return the SNS MessageId."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            response = await asyncio.to_thread(
                self._client.publish,
                TopicArn=self._topic_arn,
                Subject=_sns_subject(subject),
                Message=message,
            )
        except (BotoCoreError, ClientError) as exc:
            raise PublishError(f"SNS publish failed: {exc}") from exc
        return response["MessageId"]


class InMemoryPublisher:
    """Test double that records published notifications for assertions."""

    def __init__(self) -> None:
        self.messages: list[dict[str, str]] = []
        self.error: Exception | None = None

    async def publish(self, subject: str, message: str) -> str:
        """Append the notification and return a fake message id.

        Raises ``PublishError`` instead when ``error`` has been set.
        """
        if self.error is not None:
            raise PublishError(str(self.error)) from self.error
        self.messages.append({"subject": subject, "message": message})
        return f"fake-message-{len(self.messages)}"
