"""Tests for the MIME type counter."""
from __future__ import annotations

from cdxscan.aggregators.counter import MimeTypeCounter, abbreviate


class TestMimeTypeCounter:
    def test_counts_case_insensitively(self) -> None:
        c = MimeTypeCounter()
        c.add("text/html")
        c.add("TEXT/HTML")
        c.add("application/pdf")
        assert c["text/html"] == 2
        assert c["application/pdf"] == 1
        assert len(c) == 2

    def test_top_sorted_by_count(self) -> None:
        c = MimeTypeCounter()
        for mime in ["a/b", "c/d", "c/d", "e/f", "c/d", "e/f"]:
            c.add(mime)
        assert c.top(2) == [("c/d", 3), ("e/f", 2)]

    def test_top_all(self) -> None:
        c = MimeTypeCounter()
        c.add("a/b")
        assert c.top(None) == [("a/b", 1)]

    def test_unknown_key_is_zero(self) -> None:
        assert MimeTypeCounter()["text/html"] == 0

    def test_total(self) -> None:
        c = MimeTypeCounter()
        for _ in range(5):
            c.add("text/html")
        assert c.total == 5

    def test_snapshot_sorted_descending(self) -> None:
        c = MimeTypeCounter()
        c.add("text/plain")
        c.add("text/html")
        c.add("text/html")
        assert c.snapshot() == "{'text/html': 2, 'text/plain': 1}"

    def test_snapshot_abbreviated(self) -> None:
        c = MimeTypeCounter()
        for i in range(50):
            c.add(f"application/x-type-{i}")
        snap = c.snapshot(100)
        assert len(snap) == 100
        assert snap.endswith("...")

    def test_empty_snapshot(self) -> None:
        assert MimeTypeCounter().snapshot() == "{}"


class TestAbbreviate:
    def test_short_text_unchanged(self) -> None:
        assert abbreviate("abc", 10) == "abc"

    def test_exact_width_unchanged(self) -> None:
        assert abbreviate("abcdef", 6) == "abcdef"

    def test_long_text_cut(self) -> None:
        assert abbreviate("abcdefghij", 6) == "abc..."
