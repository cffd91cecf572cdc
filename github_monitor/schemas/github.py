"""Pydantic models for the GitHub commits API response."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class FileChange(BaseModel):
    """One changed file of a commit.

    GitHub reports ``added``, ``modified``, ``removed`` and ``renamed`` (plus
    the rarer ``copied``, ``changed`` and ``unchanged``), so status is kept as
    a plain string. Missing or malformed counts fall back to 0.
    """

    filename: str = ""
    status: str = ""
    additions: int = 0
    deletions: int = 0
    patch: str | None = None

    @field_validator("filename", "status", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("additions", "deletions", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    @field_validator("patch", mode="before")
    @classmethod
    def _coerce_patch(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class CommitDiff(BaseModel):
    """The file-level changes of a single commit."""

    sha: str = ""
    files: list[FileChange] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: Any) -> "CommitDiff":
        """Build from a ``GET /repos/{repo}/commits/{sha}`` JSON body.

        Non-dict file entries are skipped rather than failing the whole diff.
        """
        if not isinstance(data, dict):
            return cls()
        raw_files = data.get("files")
        files = [
            FileChange.model_validate(item)
            for item in (raw_files if isinstance(raw_files, list) else [])
            if isinstance(item, dict)
        ]
        sha = data.get("sha")
        return cls(sha=sha if isinstance(sha, str) else "", files=files)
