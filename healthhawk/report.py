"""Console report — one line per outcome plus a summary, rendered with rich."""

from __future__ import annotations

from rich.console import Console

from healthhawk.health.models import Outcome, RunResult

BANNER = "🦅 Health Hawk is on the hunt...\n"
WATCH_NOTICE = "Continuous mode enabled. Press Ctrl+C to stop.\n"


def format_outcome(outcome: Outcome, verbose: bool = False) -> str:
    glyph = "✅" if outcome.success else "❌"
    line = f"{glyph} {outcome.url}"
    if verbose:
        line += f" - Status: {outcome.detail} - Latency_ms: {outcome.duration_ms}ms"
    return line


def format_summary(result: RunResult) -> str:
    return f"🦅 Health Hawk Summary: {result.healthy_count}/{result.total_count} healthy"


class Reporter:
    """Prints run results; URLs are printed verbatim (no markup, no wrapping)."""

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose

    def _line(self, text: str, style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def banner(self, watch: bool = False) -> None:
        self._line(BANNER)
        if watch:
            self._line(WATCH_NOTICE)

    def retry(self, url: str, attempt: int, outcome: Outcome) -> None:
        if self.verbose:
            self._line(f"↻ Retry {url} ({attempt})", style="yellow")

    def result(self, result: RunResult) -> None:
        for outcome in result.outcomes:
            style = "green" if outcome.success else "red"
            self._line(format_outcome(outcome, self.verbose), style=style)
        self._line("")
        self._line(format_summary(result))

    def exported(self, path: object) -> None:
        if self.verbose:
            self._line(f"Results written to {path}", style="blue")
