"""Shared pytest fixtures for cdxscan tests."""
from __future__ import annotations

import gzip
import json
from pathlib import Path

import pytest

from cdxscan.aggregators.counter import MimeTypeCounter
from cdxscan.search.evaluator import MatchEvaluator
from cdxscan.search.matchers import ExtensionMatcher, MimeTypeMatcher


class MemorySink:
    """In-memory stand-in for AppendFileSink."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def append(self, line: str) -> None:
        self.lines.append(line)


def cdx_line(url: str, mime: str, timestamp: str = "20170820123456", **extra: str) -> str:
    payload = {"url": url, "mime": mime, "status": "200", "digest": "ABCDEF", **extra}
    return f"org,example)/ {timestamp} {json.dumps(payload)}"


@pytest.fixture()
def gzip_members():
    """Return a factory that gzips each list of lines as a separate member."""

    def _make(*members: list[str]) -> bytes:
        return b"".join(
            gzip.compress("".join(line + "\n" for line in lines).encode("utf-8"))
            for lines in members
        )

    return _make


@pytest.fixture()
def gzip_file(tmp_path: Path, gzip_members):
    """Return a factory that writes a multi-member gzip file."""

    def _make(*members: list[str], name: str = "cdx-00000.gz") -> Path:
        p = tmp_path / name
        p.write_bytes(gzip_members(*members))
        return p

    return _make


@pytest.fixture()
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture()
def counter() -> MimeTypeCounter:
    return MimeTypeCounter()


@pytest.fixture()
def evaluator(counter: MimeTypeCounter, sink: MemorySink) -> MatchEvaluator:
    return MatchEvaluator(
        url_matcher=ExtensionMatcher([".pdf", ".doc"]),
        mime_matcher=MimeTypeMatcher(["application/pdf"]),
        counter=counter,
        sink=sink,
    )
