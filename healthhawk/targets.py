"""Endpoint source — reads the list of URLs to check from a text file.

One endpoint per line; surrounding whitespace is trimmed and blank lines are
skipped. The file is re-read on every watch tick so edits are picked up.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class EndpointFileError(Exception):
    """Raised when the endpoint file cannot be read."""


class EmptyEndpointListError(EndpointFileError):
    """Raised when the endpoint file contains no endpoints."""


def parse_endpoints(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def load_endpoints(path: str | Path) -> list[str]:
    """Read endpoints from ``path`` in file order."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise EndpointFileError(f"File not found: {p}")
    except (OSError, UnicodeDecodeError) as e:
        raise EndpointFileError(f"Cannot read {p}: {e}")

    urls = parse_endpoints(text)
    if not urls:
        raise EmptyEndpointListError("The file is empty or contains no valid URLs.")

    logger.debug("Loaded %d endpoints from %s", len(urls), p)
    return urls
