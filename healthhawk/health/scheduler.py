"""Run orchestration — one full pass over the endpoints, optionally repeated.

HealthRunner drives limiter → retry policy → probe for every endpoint and
hands the settled results to the aggregator. WatchScheduler repeats runs on a
fixed period measured from the start of one run to the start of the next.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import httpx

from .aggregator import aggregate
from .engine import RetryCallback, check_endpoint
from .limiter import ConcurrencyLimiter
from .models import RunConfig, RunResult, RunState

logger = logging.getLogger(__name__)


class HealthRunner:
    """Executes health-check runs with a fixed configuration.

    Lifecycle per run: idle → running → completed.
    """

    def __init__(
        self,
        config: RunConfig,
        client: httpx.AsyncClient | None = None,
        on_retry: RetryCallback | None = None,
    ) -> None:
        self.config = config
        self.client = client  # injected clients are left open
        self.on_retry = on_retry
        self.state = RunState.IDLE
        self.last_limiter: ConcurrencyLimiter | None = None

    async def run(self, urls: Sequence[str]) -> RunResult:
        """Check every endpoint once (plus retries) and return the summary."""
        if self.state == RunState.RUNNING:
            raise RuntimeError("A health check run is already in progress")
        self.state = RunState.RUNNING

        started_at = datetime.now(timezone.utc).isoformat()
        t0 = time.perf_counter()
        urls = list(urls)
        try:
            if self.client is not None:
                results = await self._check_all(self.client, urls)
            else:
                async with self._make_client() as client:
                    results = await self._check_all(client, urls)
        except BaseException:
            self.state = RunState.IDLE
            raise

        result = aggregate(
            urls, results,
            started_at=started_at,
            duration_ms=round((time.perf_counter() - t0) * 1000),
        )
        self.state = RunState.COMPLETED
        logger.info(
            "Run finished: %d/%d healthy in %dms",
            result.healthy_count, result.total_count, result.duration_ms,
        )
        return result

    def _make_client(self) -> httpx.AsyncClient:
        """Per-run client: httpx timeout equals the attempt deadline, pool size equals the slot count."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout_ms / 1000),
            limits=httpx.Limits(
                max_connections=self.config.concurrency,
                max_keepalive_connections=self.config.concurrency,
            ),
            follow_redirects=False,
        )

    async def _check_all(self, client: httpx.AsyncClient, urls: list[str]) -> list[Any]:
        limiter = ConcurrencyLimiter(self.config.concurrency)
        self.last_limiter = limiter
        return await limiter.gather(
            lambda url=url: check_endpoint(client, url, self.config, self.on_retry)
            for url in urls
        )


async def run_health_check(
    urls: Sequence[str],
    config: RunConfig | None = None,
    client: httpx.AsyncClient | None = None,
    on_retry: RetryCallback | None = None,
) -> RunResult:
    """Single run with a throwaway runner."""
    return await HealthRunner(config or RunConfig(), client=client, on_retry=on_retry).run(urls)


# ── Watch mode ───────────────────────────────────────────────────────────────


def next_delay(started: float, now: float, interval_s: float) -> float:
    """Seconds to wait before the next run; zero when the last run overran."""
    return max(0.0, started + interval_s - now)


class WatchScheduler:
    """Repeats health-check runs every ``interval_ms``.

    Runs never overlap: a run that outlasts the period is followed
    immediately by the next one. Endpoints are re-read on every tick.

    Lifecycle:
        scheduler = WatchScheduler(runner, provider, 60_000, on_run=print_result)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        runner: HealthRunner,
        endpoints_provider: Callable[[], Sequence[str]],
        interval_ms: int,
        on_run: Callable[[RunResult], Any] | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Watch interval must be positive, got {interval_ms}")
        self.runner = runner
        self.endpoints_provider = endpoints_provider
        self.interval_s = interval_ms / 1000
        self.on_run = on_run
        self.runs = 0
        self._task: asyncio.Task[None] | None = None
        self._running = False

    async def start(self) -> None:
        """Start the watch loop as a background task."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self.run_forever(), name="healthhawk-watch")
        logger.info("Watch mode started (interval=%ss)", self.interval_s)

    async def stop(self) -> None:
        """Stop the watch loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Watch mode stopped")

    async def run_forever(self, max_runs: int | None = None) -> None:
        """Loop until stopped, cancelled, or ``max_runs`` runs have finished."""
        self._running = True
        try:
            while self._running and (max_runs is None or self.runs < max_runs):
                started = time.monotonic()
                await self._tick()
                self.runs += 1
                if max_runs is not None and self.runs >= max_runs:
                    break
                delay = next_delay(started, time.monotonic(), self.interval_s)
                if delay == 0:
                    logger.warning("Run took longer than the %ss interval; starting next run now", self.interval_s)
                await asyncio.sleep(delay)
        finally:
            self._running = False

    async def _tick(self) -> None:
        try:
            urls = self.endpoints_provider()
            result = await self.runner.run(urls)
        except Exception:
            logger.exception("Watch run %d failed", self.runs + 1)
            return

        if self.on_run:
            try:
                self.on_run(result)
            except Exception:
                logger.exception("Run callback error")
