"""Append-only output file for matched CDX lines."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import SinkWriteError


@runtime_checkable
class Sink(Protocol):
    """Anything that accepts matched raw lines."""

    def append(self, line: str) -> None:
        ...


class AppendFileSink:
    """Append one line per match to a UTF-8 text file.

    The file is opened per append and never truncated, so results keep
    accumulating across shards and across runs.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def append(self, line: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            raise SinkWriteError(f"cannot append to {self.path}: {exc}", str(self.path)) from exc

    def __repr__(self) -> str:
        return f"AppendFileSink({str(self.path)!r})"
