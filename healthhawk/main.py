"""Entry point for the Health Hawk CLI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable

from pydantic import ValidationError
from rich.console import Console

from healthhawk.config import Settings, get_settings
from healthhawk.health.aggregator import export_results
from healthhawk.health.models import RunConfig, RunResult
from healthhawk.health.scheduler import HealthRunner, WatchScheduler
from healthhawk.report import Reporter
from healthhawk.targets import EndpointFileError, load_endpoints

console = Console()
err_console = Console(stderr=True)


def _int_at_least(minimum: int) -> Callable[[str], int]:
    """argparse ``type=`` converter for integers >= ``minimum``."""

    def convert(value: str) -> int:
        try:
            n = int(value, 10)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
        if n < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {n}")
        return n

    return convert


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    positive = _int_at_least(1)
    parser = argparse.ArgumentParser(
        prog="healthhawk",
        description="🦅 Health Hawk - Website Health Checker",
    )
    parser.add_argument("file", help="Text file with one URL per line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("--json", dest="json_file", metavar="FILE", help="Export results to a JSON file")
    parser.add_argument(
        "-t", "--timeout", type=positive, metavar="MS",
        help=f"Request timeout in ms (default: {settings.timeout_ms})",
    )
    parser.add_argument(
        "-r", "--retries", type=_int_at_least(0), metavar="N",
        help=f"Retry failed checks up to N times (default: {settings.max_retries})",
    )
    parser.add_argument(
        "-c", "--concurrency", type=positive, metavar="N",
        help=f"Maximum simultaneous checks (default: {settings.concurrency})",
    )
    parser.add_argument(
        "-w", "--watch", action="store_true",
        help=f"Run health checks every {settings.watch_interval_ms // 1000}s (Ctrl+C to stop)",
    )
    parser.add_argument("--interval", type=positive, metavar="MS", help="Watch mode period in ms")
    return parser


def _make_publisher(reporter: Reporter, json_file: str | None) -> Callable[[RunResult], None]:
    """Print a result and, when requested, export it."""

    def publish(result: RunResult) -> None:
        reporter.result(result)
        if json_file:
            path = export_results(result, json_file)
            reporter.exported(path)

    return publish


async def run(args: argparse.Namespace, reporter: Reporter, settings: Settings) -> int:
    """Execute a single run or the watch loop. Returns the exit code."""
    try:
        urls = load_endpoints(args.file)
    except EndpointFileError as e:
        err_console.print(str(e), style="red", markup=False, highlight=False)
        return 1

    try:
        config = RunConfig.from_settings(
            settings,
            concurrency=args.concurrency,
            timeout_ms=args.timeout,
            max_retries=args.retries,
            watch=args.watch,
            watch_interval_ms=args.interval,
        )
    except ValidationError as e:
        err_console.print(f"Invalid configuration: {e}", style="red", markup=False, highlight=False)
        return 1

    reporter.banner(watch=config.watch)
    runner = HealthRunner(config, on_retry=reporter.retry)
    publish = _make_publisher(reporter, args.json_file)

    if config.watch_interval_ms is not None:
        first = True

        def provider() -> list[str]:
            nonlocal first
            if first:
                first = False
                return urls
            return load_endpoints(args.file)

        scheduler = WatchScheduler(runner, provider, config.watch_interval_ms, on_run=publish)
        await scheduler.run_forever()
        return 0

    result = await runner.run(urls)
    try:
        publish(result)
    except OSError as e:
        err_console.print(f"Could not write {args.json_file}: {e}", style="red", markup=False, highlight=False)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        err_console.print(f"Invalid configuration: {e}", style="red", markup=False, highlight=False)
        sys.exit(1)

    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    reporter = Reporter(console, verbose=args.verbose)
    try:
        code = asyncio.run(run(args, reporter, settings))
    except KeyboardInterrupt:
        console.print("\n[dim]Health Hawk stopped.[/dim]")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
