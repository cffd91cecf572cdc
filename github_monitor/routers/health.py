"""Health check and Prometheus metrics endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from github_monitor.config import Settings, get_settings
from github_monitor.dependencies import get_metrics
from github_monitor.metrics import WebhookMetrics
from github_monitor.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz(settings: Annotated[Settings, Depends(get_settings)]) -> HealthResponse:
    """Report liveness along with the configured environment and repository."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        repository=settings.github_repository,
    )


@router.get("/metrics")
async def metrics_endpoint(metrics: Annotated[WebhookMetrics, Depends(get_metrics)]) -> Response:
    """Prometheus metrics endpoint."""
    return Response(generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)
