"""Health check engine — probes one endpoint and applies the retry budget.

A probe is a single GET with a deadline on the response headers. Every
outcome (2xx, other status, transport error, timeout, bad scheme) is folded
into an Outcome; the probe itself never raises.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from .models import INVALID_PROTOCOL, TIMEOUT, Outcome, RunConfig

logger = logging.getLogger(__name__)

SUPPORTED_PREFIXES = ("http://", "https://")

RetryCallback = Callable[[str, int, Outcome], Any]


def _elapsed_ms(t0: float) -> int:
    return max(0, round((time.perf_counter() - t0) * 1000))


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


# ── Probe ────────────────────────────────────────────────────────────────────


async def _fetch_status(client: httpx.AsyncClient, url: str) -> int:
    # Streaming: only the headers are awaited, the body is discarded on close.
    async with client.stream("GET", url) as resp:
        return resp.status_code


async def probe_endpoint(client: httpx.AsyncClient, url: str, timeout_ms: int) -> Outcome:
    """Issue one GET against ``url`` and classify the result."""
    t0 = time.perf_counter()

    if not url.lower().startswith(SUPPORTED_PREFIXES):
        return Outcome(url=url, success=False, error_message=INVALID_PROTOCOL, duration_ms=_elapsed_ms(t0))

    try:
        status_code = await asyncio.wait_for(_fetch_status(client, url), timeout=timeout_ms / 1000)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        return Outcome(url=url, success=False, error_message=TIMEOUT, duration_ms=_elapsed_ms(t0))
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        return Outcome(url=url, success=False, error_message=_error_text(e), duration_ms=_elapsed_ms(t0))
    except Exception as e:
        logger.debug("Unexpected probe error for %s", url, exc_info=True)
        return Outcome(
            url=url, success=False,
            error_message=f"{type(e).__name__}: {e}", duration_ms=_elapsed_ms(t0),
        )

    duration = _elapsed_ms(t0)
    return Outcome(url=url, success=200 <= status_code < 300, status_code=status_code, duration_ms=duration)


# ── Retry policy ─────────────────────────────────────────────────────────────


async def check_endpoint(
    client: httpx.AsyncClient,
    url: str,
    config: RunConfig,
    on_retry: RetryCallback | None = None,
) -> Outcome:
    """Probe ``url`` up to ``max_retries + 1`` times, stopping at the first success.

    Retries are immediate and apply to every failure kind. The returned
    Outcome is the last attempt only, so its duration excludes earlier tries.
    """
    outcome = await probe_endpoint(client, url, config.timeout_ms)
    for attempt in range(1, config.max_retries + 1):
        if outcome.success:
            break
        logger.info("Retrying %s (%d/%d): %s", url, attempt, config.max_retries, outcome.detail)
        if on_retry:
            try:
                on_retry(url, attempt, outcome)
            except Exception:
                logger.exception("Retry callback error")
        outcome = await probe_endpoint(client, url, config.timeout_ms)

    logger.debug(
        "Check %s: %s (%s, %dms)",
        url, "up" if outcome.success else "down", outcome.detail, outcome.duration_ms,
    )
    return outcome
