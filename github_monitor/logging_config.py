"""Structured logging configuration using structlog.

``configure_logging`` is called once per process, from the FastAPI lifespan or
the Lambda cold start. Every log line carries the service name and the
deployment environment so webhook logs from dev and prod are easy to tell
apart in the same sink.
"""

from __future__ import annotations

import logging
import sys

import structlog

SERVICE_NAME = "github-webhook-processor"

# botocore logs every credential lookup and httpx every request at INFO
NOISY_LOGGERS = ("botocore", "httpx")


def configure_logging(
    *,
    json_logs: bool = True,
    log_level: str = "INFO",
    environment: str | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        json_logs: Render JSON (production) instead of the console renderer.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
        environment: Deployment label bound into every log record.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer()
                if json_logs
                else structlog.dev.ConsoleRenderer(),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)
    if environment:
        structlog.contextvars.bind_contextvars(environment=environment)
