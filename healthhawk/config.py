from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HEALTHHAWK_",
        "extra": "ignore",
    }

    # Checks
    concurrency: int = 10  # simultaneous in-flight requests
    timeout_ms: int = 5_000  # per attempt
    max_retries: int = 0  # extra attempts after a failure

    # Watch mode period (start of one run → start of the next)
    watch_interval_ms: int = 60_000

    # Logging (WARNING keeps diagnostics out of the report)
    log_level: str = "WARNING"


def get_settings() -> Settings:
    """Read settings from the environment; raises ``pydantic.ValidationError`` on bad values."""
    return Settings()
