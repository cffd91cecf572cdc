"""GitHub webhook intake route."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from github_monitor.dependencies import get_push_handler
from github_monitor.services.push_handler import PushNotificationHandler

router = APIRouter(tags=["webhooks"])


@router.post("/webhook")
async def github_webhook(
    request: Request,
    handler: Annotated[PushNotificationHandler, Depends(get_push_handler)],
) -> JSONResponse:
    """Receive a GitHub webhook delivery.

    The body is read as raw bytes and handed over untouched, since the
    signature is computed over the exact bytes GitHub sent.
    """
    raw_body = await request.body()
    result = await handler.handle(raw_body, request.headers)
    return JSONResponse(status_code=result.status_code, content=result.content)
