"""Plain-text rendering of commit diffs and push notification emails.

Everything here is pure: the same input always renders the same text, and
malformed file entries are rendered with defaults instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from github_monitor.schemas.github import FileChange
from github_monitor.schemas.notifications import NotificationMessage
from github_monitor.schemas.webhooks import CommitSummary

NO_FILE_CHANGES = "No file changes"
DIFF_FETCH_ERROR = "Error fetching diff"

DEFAULT_MAX_FILES = 5
DEFAULT_MAX_PATCH_CHARS = 1000

_FILE_SEPARATOR = "=" * 40


def _as_file_change(entry: FileChange | Mapping[str, Any] | Any) -> FileChange:
    if isinstance(entry, FileChange):
        return entry
    if isinstance(entry, Mapping):
        try:
            return FileChange.model_validate(dict(entry))
        except ValidationError:
            return FileChange()
    return FileChange()


def format_diff(
    files: Iterable[FileChange | Mapping[str, Any]] | None,
    *,
    max_files: int = DEFAULT_MAX_FILES,
    max_patch_chars: int = DEFAULT_MAX_PATCH_CHARS,
) -> str:
    """Render at most ``max_files`` file changes as a text block.

    Patches are included only when shorter than ``max_patch_chars``. When
    files are left out, the text ends with ``... and N more files``.
    """
    changes = [_as_file_change(entry) for entry in files or []]
    if not changes:
        return NO_FILE_CHANGES

    parts: list[str] = []
    for change in changes[:max_files]:
        parts.append(f"\n--- {change.filename} ---\n")
        parts.append(f"Status: {change.status} (+{change.additions} -{change.deletions})\n")
        if change.patch and len(change.patch) < max_patch_chars:
            parts.append(f"\n{change.patch}\n")
        parts.append(f"\n{_FILE_SEPARATOR}\n")

    remaining = len(changes) - max_files
    if remaining > 0:
        parts.append(f"\n... and {remaining} more files\n")

    return "".join(parts)


def format_subject(repository: str, total_commits: int) -> str:
    return f"GitHub Push: {total_commits} commit(s) to {repository}"


def format_notification(
    *,
    repository: str,
    environment: str,
    commit: CommitSummary,
    total_commits: int,
    diff_text: str,
) -> NotificationMessage:
    """Build the email for the final commit of a push."""
    lines = [
        f"New commits pushed to {repository}",
        f"Environment: {environment}",
        "",
    ]
    if total_commits > 1:
        lines += [f"Total commits: {total_commits} (showing final commit)", ""]
    lines += [
        "Final Commit:",
        f"SHA: {commit.id}",
        f"Author: {commit.author_name}",
        f"Date: {commit.timestamp}",
        f"Message: {commit.message}",
        f"URL: {commit.url}",
        "",
        "Changes:",
        diff_text,
    ]
    return NotificationMessage(
        subject=format_subject(repository, total_commits),
        message="\n".join(lines) + "\n",
    )
