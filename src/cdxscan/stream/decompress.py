"""Streaming gzip decompression of CDX shards with byte-level progress.

Layering, bottom to top::

    source (HTTP body / file)
      -> CountingReader        compressed bytes consumed
      -> gzip.GzipFile         concatenated members, decoded transparently
      -> CountingReader        decompressed bytes produced
      -> io.BufferedReader     large buffer against a high-latency source
      -> io.TextIOWrapper      UTF-8 lines

Both counters are live, so progress can be reported while decoding, not
only at end of stream.
"""
from __future__ import annotations

import gzip
import io
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from ..errors import DecodeError

DEFAULT_BUFFER_SIZE = 1024 * 1024

# gzip raises EOFError on truncation, BadGzipFile on a bad header, zlib.error on bad data
_DECODE_ERRORS = (EOFError, gzip.BadGzipFile, zlib.error)


@dataclass(frozen=True)
class ByteProgress:
    """Snapshot of how far into a shard the decompressor has read."""

    compressed_bytes_read: int = 0
    decompressed_bytes_read: int = 0
    total_compressed_length: int | None = None

    @property
    def percent(self) -> float:
        """Share of the declared compressed length consumed, clamped to 0-100.

        0.0 when the length is unknown or zero.
        """
        if not self.total_compressed_length or self.total_compressed_length <= 0:
            return 0.0
        pct = self.compressed_bytes_read / self.total_compressed_length * 100
        return max(0.0, min(100.0, pct))


class CountingReader(io.RawIOBase):
    """Raw stream that counts the bytes read through it.

    Closing it does not close the wrapped stream.
    """

    def __init__(self, fileobj: BinaryIO) -> None:
        super().__init__()
        self._fileobj = fileobj
        self.count = 0

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # type: ignore[override]
        data = self._fileobj.read(len(b))
        n = len(data)
        b[:n] = data
        self.count += n
        return n


class LineStream:
    """Iterate the text lines of a (possibly multi-member) gzip stream.

    Usage::

        with LineStream(response.raw, total_length=length) as lines:
            for line in lines:
                ...
            print(lines.progress.percent)

    Lines are yielded without their line terminator. Corrupt or truncated
    gzip data raises DecodeError. The source stream is never closed here.
    """

    def __init__(
        self,
        source: BinaryIO,
        total_length: int | None = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        if buffer_size < DEFAULT_BUFFER_SIZE:
            raise ValueError(f"buffer_size must be at least {DEFAULT_BUFFER_SIZE} bytes")
        self._total_length = total_length
        self._compressed = CountingReader(source)
        self._gzip = gzip.GzipFile(fileobj=self._compressed, mode="rb")
        self._decompressed = CountingReader(self._gzip)  # type: ignore[arg-type]
        self._text = io.TextIOWrapper(
            io.BufferedReader(self._decompressed, buffer_size=buffer_size),
            encoding="utf-8",
            errors="replace",
            newline="",
        )

    @property
    def progress(self) -> ByteProgress:
        return ByteProgress(
            compressed_bytes_read=self._compressed.count,
            decompressed_bytes_read=self._decompressed.count,
            total_compressed_length=self._total_length,
        )

    def __iter__(self) -> Iterator[str]:
        try:
            for line in self._text:
                yield line.rstrip("\r\n")
        except _DECODE_ERRORS as exc:
            raise DecodeError(f"corrupt or truncated gzip stream: {exc}") from exc

    def close(self) -> None:
        self._text.close()
        self._gzip.close()

    def __enter__(self) -> "LineStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
