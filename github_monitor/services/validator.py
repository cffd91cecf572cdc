"""Structural checks on an incoming push webhook.

The checks run in a fixed order and each failure raises a distinct
``PayloadValidationError`` subclass so the caller can answer GitHub with the
right status: ignored events get a 200, a foreign repository a 403 and a
broken payload a 400.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from github_monitor.errors import EventIgnored, MalformedPayload, RepositoryNotAuthorized
from github_monitor.schemas.webhooks import PushPayload

PUSH_EVENT = "push"


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup.

    Tries the lower-case form first (what API Gateway and Starlette hand us),
    then scans for any other capitalisation such as ``X-GitHub-Event``.
    """
    lowered = name.lower()
    if lowered in headers:
        return headers[lowered]
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def get_event_type(headers: Mapping[str, str]) -> str | None:
    """Return the ``X-GitHub-Event`` header value, if any."""
    return get_header(headers, "x-github-event")


def validate_push_event(
    payload: Any,
    headers: Mapping[str, str],
    target_repository: str,
) -> PushPayload:
    """Validate a decoded webhook body and return the parsed push payload.

    Raises:
        EventIgnored: The event type is not ``push``.
        MalformedPayload: The repository object or its ``full_name`` is
            missing or malformed, or the commits cannot be parsed.
        RepositoryNotAuthorized: ``full_name`` is not the configured target.
    """
    event_type = get_event_type(headers)
    if event_type != PUSH_EVENT:
        raise EventIgnored(f"Event ignored - not a push event ({event_type or 'missing'})")

    if not isinstance(payload, dict):
        raise MalformedPayload("Payload must be a JSON object")

    repository = payload.get("repository")
    if not isinstance(repository, dict):
        raise MalformedPayload("Missing repository object")

    full_name = repository.get("full_name")
    if not isinstance(full_name, str) or not full_name.strip():
        raise MalformedPayload("Missing repository full_name")
    owner, _, name = full_name.partition("/")
    if not owner or not name or "/" in name:
        raise MalformedPayload('Repository full_name must be in format "owner/repo"')

    if full_name != target_repository:
        raise RepositoryNotAuthorized("Repository not authorized")

    try:
        return PushPayload.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise MalformedPayload(f"Invalid push payload: {', '.join(fields)}") from exc
