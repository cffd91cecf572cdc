"""Integration tests for /healthz and /metrics."""

import pytest
from httpx import AsyncClient

from tests.helpers import make_push_payload, webhook_request


@pytest.mark.anyio
async def test_healthz_returns_200(client: AsyncClient) -> None:
    """GET /healthz reports status with the configured environment and repository."""
    response = await client.get("/healthz")
    assert response.status_code == 200

    body = response.json()
    assert body == {"status": "ok", "environment": "test", "repository": "testuser/my-repo"}


@pytest.mark.anyio
async def test_metrics_exposes_webhook_counters(client: AsyncClient) -> None:
    await client.post("/webhook", **webhook_request(make_push_payload()))
    await client.post("/webhook", **webhook_request({"zen": "hi"}, event="ping"))

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    text = response.text
    assert "github_monitor_webhooks_received_total 2.0" in text
    assert 'github_monitor_events_ignored_total{reason="event_type"} 1.0' in text
    assert 'github_monitor_notifications_total{status="sent"} 1.0' in text
