"""FastAPI application with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from github_monitor.config import get_settings
from github_monitor.dependencies import init_production_deps
from github_monitor.logging_config import configure_logging
from github_monitor.routers import health, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load configuration, then create and dispose the shared HTTP client.

    ``get_settings`` raises ``ConfigurationError`` when required values are
    missing, so a misconfigured process never starts serving.
    """
    settings = get_settings()
    configure_logging(
        json_logs=not settings.debug,
        log_level=settings.log_level,
        environment=settings.environment,
    )
    init_production_deps(sns_topic_arn=settings.sns_topic_arn, aws_region=settings.aws_region)

    app.state.http_client = httpx.AsyncClient(timeout=settings.github_timeout_seconds)
    structlog.get_logger().info(
        "service_started",
        repository=settings.github_repository,
        app_name=settings.app_name,
    )
    yield
    await app.state.http_client.aclose()


app = FastAPI(title="github-monitor", lifespan=lifespan)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(health.router)
app.include_router(webhooks.router)


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)
