"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], Any]], httpx.AsyncClient]:
    """Factory for an AsyncClient whose requests are answered by ``handler``.

    Create the client inside the coroutine under test; handlers may be plain
    or async functions and may raise httpx errors to simulate transport faults.
    """

    def factory(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def endpoints_file(tmp_path):
    """Write lines to a temp endpoint file and return its path."""

    def write(*lines: str):
        path = tmp_path / "urls.txt"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return write
