"""
Configuration settings for the retry runner.

Process-wide defaults are loaded from environment variables (prefix
``RETRY_RUNNER_``) with sensible defaults. Callables and exception lists
cannot come from the environment; assign them in code:

    settings.EXCEPTIONS_TO_RETRY = [TimeoutError]
    settings.SKIP_RETRY_IF = lambda test: "quarantine" in test.metadata

Use .env file for local development.
"""

from typing import Any, Callable, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "RETRY_RUNNER_"


class Settings(BaseSettings):
    """Process-wide retry settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Reporting ===
    VERBOSE_RETRY: bool = False  # "Nth try" messages before each re-run
    DISPLAY_TRY_FAILURE_MESSAGES: bool = False  # Needs VERBOSE_RETRY as well

    # === Retry Defaults (overridable per test) ===
    DEFAULT_RETRY_COUNT: int = 1  # Total attempts, 1 = no retries
    DEFAULT_SLEEP_INTERVAL: float = 0.0  # seconds
    CLEAR_FIXTURES_ON_FAILURE: bool = True

    # === Global Budget ===
    MAX_RETRIES: Optional[int] = Field(default=None, ge=0)  # None = disabled

    # === Exception Classification (process-wide only) ===
    EXCEPTIONS_TO_HARD_FAIL: list[Any] = Field(default_factory=list, exclude=True)
    EXCEPTIONS_TO_RETRY: list[Any] = Field(default_factory=list, exclude=True)

    # === Hooks ===
    RETRY_CALLBACK: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    SKIP_RETRY_IF: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    RETRY_COUNT_CONDITION: Optional[Callable[..., Any]] = Field(default=None, exclude=True)


class RetryCountOverride(BaseSettings):
    """
    External retry count override (``RETRY_RUNNER_RETRY_COUNT``).

    Instantiated on every policy resolution so the environment is read
    fresh each time.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    RETRY_COUNT: Optional[str] = None


def read_retry_count_override() -> Optional[str]:
    """Return the raw override retry count from the environment, if set."""
    raw = RetryCountOverride().RETRY_COUNT
    if raw is None or not raw.strip():
        return None
    return raw.strip()


# Global settings instance
settings = Settings()
