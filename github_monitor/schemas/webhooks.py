"""Pydantic models for GitHub push webhook payloads and handler responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommitAuthor(BaseModel):
    """Author information from a Git commit."""

    name: str | None = None
    email: str | None = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class CommitSummary(BaseModel):
    """A single commit within a GitHub push event.

    Only ``id`` is required. The display fields fall back to empty values
    when GitHub sends null or an unexpected type.
    """

    id: str = Field(min_length=1)
    message: str = ""
    timestamp: str = ""
    url: str = ""
    author: CommitAuthor | None = None

    @field_validator("message", "timestamp", "url", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("author", mode="before")
    @classmethod
    def _coerce_author(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def author_name(self) -> str:
        if self.author and self.author.name:
            return self.author.name
        return "Unknown"


class Repository(BaseModel):
    """Repository metadata from the webhook payload."""

    model_config = ConfigDict(extra="ignore")

    full_name: str


class PushPayload(BaseModel):
    """GitHub push webhook event payload.

    Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
    """

    model_config = ConfigDict(extra="ignore")

    ref: str = ""
    before: str | None = None
    after: str | None = None
    repository: Repository
    commits: list[CommitSummary] = Field(default_factory=list)

    @property
    def final_commit(self) -> CommitSummary | None:
        """The most recent commit of the push, the only one that is notified."""
        return self.commits[-1] if self.commits else None


class WebhookResult(BaseModel):
    """HTTP status and JSON body produced for one webhook delivery."""

    status_code: int
    content: dict[str, Any]
