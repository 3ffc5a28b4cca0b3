"""Tests for reading the endpoint file."""

from __future__ import annotations

import pytest

from healthhawk.targets import (
    EmptyEndpointListError,
    EndpointFileError,
    load_endpoints,
    parse_endpoints,
)


class TestParseEndpoints:
    def test_trims_and_skips_blanks(self) -> None:
        text = "  https://a.example  \n\n\t\nhttp://b.example\r\nftp://x\n"
        assert parse_endpoints(text) == ["https://a.example", "http://b.example", "ftp://x"]

    def test_keeps_duplicates_in_order(self) -> None:
        assert parse_endpoints("https://a\nhttps://a\n") == ["https://a", "https://a"]


class TestLoadEndpoints:
    def test_reads_file(self, endpoints_file) -> None:
        path = endpoints_file("https://ok.example", "", "  http://bad-scheme ", "ftp://x")
        assert load_endpoints(path) == ["https://ok.example", "http://bad-scheme", "ftp://x"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(EndpointFileError, match="not found"):
            load_endpoints(tmp_path / "nope.txt")

    def test_blank_file(self, endpoints_file) -> None:
        path = endpoints_file("", "   ", "")
        with pytest.raises(EmptyEndpointListError):
            load_endpoints(path)

    def test_empty_is_an_endpoint_file_error(self) -> None:
        assert issubclass(EmptyEndpointListError, EndpointFileError)
