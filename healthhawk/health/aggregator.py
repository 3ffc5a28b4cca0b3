"""Aggregation of settled checks into a RunResult, plus JSON export."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from .models import UNKNOWN, Outcome, RunResult

logger = logging.getLogger(__name__)


def settle(urls: Sequence[str], results: Sequence[Outcome | BaseException]) -> list[Outcome]:
    """Turn settled task results into Outcomes, one per endpoint.

    A task that raised instead of producing an Outcome becomes a placeholder
    failure with error ``"unknown"`` so counts stay consistent.
    """
    if len(urls) != len(results):
        raise ValueError(f"Expected {len(urls)} results, got {len(results)}")

    outcomes: list[Outcome] = []
    for url, result in zip(urls, results):
        if isinstance(result, Outcome):
            outcomes.append(result)
            continue
        logger.error("Check for %s did not settle: %r", url, result, exc_info=result)
        outcomes.append(Outcome(url=url, success=False, error_message=UNKNOWN, duration_ms=0))
    return outcomes


def sort_outcomes(outcomes: Sequence[Outcome]) -> list[Outcome]:
    """Successes first; enumeration order kept within each group."""
    return sorted(outcomes, key=lambda o: not o.success)


def aggregate(
    urls: Sequence[str],
    results: Sequence[Outcome | BaseException],
    started_at: str = "",
    duration_ms: int = 0,
) -> RunResult:
    return RunResult(
        outcomes=sort_outcomes(settle(urls, results)),
        started_at=started_at,
        duration_ms=duration_ms,
    )


# ── JSON export ──────────────────────────────────────────────────────────────


def export_results(result: RunResult, path: str | Path) -> Path:
    """Write the ordered outcome records to ``path`` as an indented JSON array.

    The file is written to a temporary sibling and moved into place, so an
    interrupted process never leaves a half-written export behind.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(result.to_records(), indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Exported %d results to %s", result.total_count, target)
    return target


def load_results(path: str | Path) -> list[Outcome]:
    """Read an export file back into Outcomes."""
    records = json.loads(Path(path).read_text(encoding="utf-8"))
    return [Outcome.from_dict(r) for r in records]
