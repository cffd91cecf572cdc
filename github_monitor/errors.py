"""Exception hierarchy for webhook intake and notification delivery."""

from __future__ import annotations


class GitHubMonitorError(Exception):
    """Base class for all service errors."""


class ConfigurationError(GitHubMonitorError):
    """Required process configuration is missing or malformed."""


class AuthenticationError(GitHubMonitorError):
    """The webhook signature is missing or does not match the body."""


class PayloadValidationError(GitHubMonitorError):
    """The webhook payload cannot be processed.

    Subclasses map to distinct HTTP responses because GitHub retries on 5xx
    but treats 2xx and 4xx as final.
    """

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EventIgnored(PayloadValidationError):
    """The event is not a push event; acknowledged and dropped."""

    status_code = 200


class RepositoryNotAuthorized(PayloadValidationError):
    """The push came from a repository other than the configured target."""

    status_code = 403


class MalformedPayload(PayloadValidationError):
    """The payload is missing required structure."""

    status_code = 400


class UpstreamFetchError(GitHubMonitorError):
    """The GitHub commits API could not be reached or returned non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PublishError(GitHubMonitorError):
    """The notification could not be delivered to the topic."""
