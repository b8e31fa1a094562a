"""Count MIME types seen across all shards of a run."""
from __future__ import annotations

from collections import Counter as _Counter


def abbreviate(text: str, max_width: int) -> str:
    """Shorten text to max_width characters, ending in '...' when cut."""
    if len(text) <= max_width:
        return text
    return text[: max_width - 3] + "..."


class MimeTypeCounter:
    """Occurrence counts keyed on the lower-cased MIME type.

    Counts only grow; the same instance is shared by every shard of a run.
    """

    def __init__(self) -> None:
        self._counts: _Counter[str] = _Counter()

    def add(self, mime_type: str) -> None:
        self._counts[mime_type.lower()] += 1

    def top(self, n: int | None = 10) -> list[tuple[str, int]]:
        return self._counts.most_common(n)

    def snapshot(self, max_width: int = 100) -> str:
        """Render the counts, highest first, cut to max_width characters."""
        return abbreviate(str(dict(self._counts.most_common())), max_width)

    def __getitem__(self, mime_type: str) -> int:
        return self._counts[mime_type.lower()]

    def __len__(self) -> int:
        return len(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())
