"""Application configuration loaded from environment variables.

Required values have no defaults: a missing repository, secret, topic or
environment label fails at start-up through ``load_settings`` instead of
letting the webhook handler run half-configured.
"""

from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_monitor.errors import ConfigurationError


class Settings(BaseSettings):
    """Immutable process configuration for the webhook service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    app_name: str = "github-monitor"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    # Target repository and delivery
    github_repository: str
    github_webhook_secret: str
    sns_topic_arn: str
    environment: str
    notification_email: str = ""
    aws_region: str = ""
    github_token: str = ""

    # Diff fetch and formatting
    github_timeout_seconds: float = 10.0
    invocation_budget_seconds: float = 30.0
    retry_max_attempts: int = 3
    retry_base_delay: float = 2.0
    retry_multiplier: float = 2.0
    diff_max_files: int = 5
    diff_max_patch_chars: int = 1000

    @field_validator("github_repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        owner, sep, name = value.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError('must be in format "owner/repo"')
        return value

    @field_validator("github_webhook_secret", "environment")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("sns_topic_arn")
    @classmethod
    def _check_topic_arn(cls, value: str) -> str:
        if not value.startswith("arn:"):
            raise ValueError("must be an SNS topic ARN")
        return value

    @field_validator("notification_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if value and "@" not in value:
            raise ValueError("must be a valid email")
        return value

    @field_validator("retry_max_attempts", "diff_max_files", "diff_max_patch_chars")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


def load_settings(**overrides: object) -> Settings:
    """Build a ``Settings`` instance or raise ``ConfigurationError``.

    Every problem is reported at once, one per line, so a misconfigured
    deployment can be fixed in a single pass.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']).upper() or 'SETTINGS'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError("\n".join(problems)) from exc


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()
