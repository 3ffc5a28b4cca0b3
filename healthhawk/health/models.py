"""Data models for health-check runs.

Outcome    — one attempt against one endpoint.
RunResult  — final outcomes of one full pass, in display order.
RunConfig  — validated knobs threaded into the engine and orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from healthhawk.config import Settings

INVALID_PROTOCOL = "Invalid URL protocol"
TIMEOUT = "Timeout"
UNKNOWN = "unknown"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


# ── Outcomes ─────────────────────────────────────────────────────────────────


@dataclass
class Outcome:
    """Result of a single check attempt.

    A response sets ``status_code``; no response (connection error, invalid
    protocol, timeout) sets ``error_message`` instead.
    """

    url: str
    success: bool
    duration_ms: int
    status_code: int | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Export record: url, success, status or error, duration."""
        record: dict[str, Any] = {"url": self.url, "success": self.success}
        if self.status_code is not None:
            record["status"] = self.status_code
        else:
            record["error"] = self.error_message or UNKNOWN
        record["duration"] = self.duration_ms
        return record

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> Outcome:
        return cls(
            url=record.get("url", ""),
            success=bool(record.get("success", False)),
            duration_ms=int(record.get("duration", 0)),
            status_code=record.get("status"),
            error_message=record.get("error"),
        )

    @property
    def detail(self) -> str:
        """Status code or error text, whichever explains this outcome."""
        if self.status_code is not None:
            return str(self.status_code)
        return self.error_message or UNKNOWN


@dataclass
class RunResult:
    """Final outcomes for one pass over every endpoint."""

    outcomes: list[Outcome]
    started_at: str = ""
    duration_ms: int = 0

    def __post_init__(self) -> None:
        if not self.started_at:
            self.started_at = datetime.now(timezone.utc).isoformat()

    @property
    def healthy_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    def to_records(self) -> list[dict[str, Any]]:
        return [o.to_dict() for o in self.outcomes]


# ── Configuration ────────────────────────────────────────────────────────────


class RunConfig(BaseModel):
    """Per-run configuration, validated once and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(default=10, gt=0)
    timeout_ms: int = Field(default=5_000, gt=0)
    max_retries: int = Field(default=0, ge=0)
    watch_interval_ms: int | None = Field(default=None, gt=0)

    @property
    def watch(self) -> bool:
        return self.watch_interval_ms is not None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        concurrency: int | None = None,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
        watch: bool = False,
        watch_interval_ms: int | None = None,
    ) -> RunConfig:
        """Merge CLI overrides (``None`` = not given) on top of settings."""
        interval = None
        if watch:
            interval = watch_interval_ms if watch_interval_ms is not None else settings.watch_interval_ms
        return cls(
            concurrency=concurrency if concurrency is not None else settings.concurrency,
            timeout_ms=timeout_ms if timeout_ms is not None else settings.timeout_ms,
            max_retries=max_retries if max_retries is not None else settings.max_retries,
            watch_interval_ms=interval,
        )
