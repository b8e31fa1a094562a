"""Shard pipeline — fetch, decompress, parse and filter one CDX shard at a time.

Per shard the driver moves through::

    OPENING -> STREAMING -> DRAINING -> CLOSED     (success)
    OPENING -> STREAMING -> ABORTING -> CLOSED     (failure)

Any failure aborts the whole run. Before the exception unwinds, the HTTP
connection is closed outright so that releasing the response does not read
the remaining gigabytes of a now-useless body.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Iterable

import requests
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from .errors import TransportError
from .parsers.cdx import parse_record
from .parsers.payload import scan_payload
from .search.evaluator import MatchEvaluator
from .shards import ShardDescriptor
from .stream.decompress import DEFAULT_BUFFER_SIZE, ByteProgress, LineStream

logger = logging.getLogger(__name__)


class ShardState(str, Enum):
    OPENING = "opening"
    STREAMING = "streaming"
    DRAINING = "draining"
    ABORTING = "aborting"
    CLOSED = "closed"


@dataclass(frozen=True)
class ShardSummary:
    index: int
    url: str
    lines: int
    matched_by_mime: int
    matched_by_url: int
    progress: ByteProgress


def content_length(response: requests.Response) -> int | None:
    """Declared Content-Length, or None when missing or unparsable."""
    raw = response.headers.get("Content-Length")
    try:
        length = int(raw) if raw is not None else None
    except ValueError:
        return None
    return length if length is not None and length >= 0 else None


class ShardPipeline:
    """Stream CDX shards through parser, payload scanner and evaluator.

    Args:
        evaluator:          Counts MIME types and appends matching lines.
        session:            requests session used to fetch shards.
        timeout:            Connect/read timeout in seconds.
        buffer_size:        Text read buffer, at least 1 MiB.
        log_every_lines:    Emit a progress line every N lines ...
        log_every_seconds:  ... or when this many seconds have passed.
        clock:              Monotonic time source.
    """

    def __init__(
        self,
        evaluator: MatchEvaluator,
        *,
        session: requests.Session | None = None,
        timeout: float = 600.0,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        log_every_lines: int = 100_000,
        log_every_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.evaluator = evaluator
        self._session = session
        self._timeout = timeout
        self._buffer_size = buffer_size
        self._log_every_lines = log_every_lines
        self._log_every_seconds = log_every_seconds
        self._clock = clock
        self.state = ShardState.CLOSED

    @property
    def session(self) -> requests.Session:
        """HTTP session, created on first use."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, shards: Iterable[ShardDescriptor]) -> list[ShardSummary]:
        """Process shards in order; the first failure stops the run."""
        summaries: list[ShardSummary] = []
        for shard in shards:
            summaries.append(self.process_shard(shard))
        return summaries

    def process_shard(self, shard: ShardDescriptor) -> ShardSummary:
        """Fetch one shard over HTTP and stream it through the pipeline."""
        logger.info("Loading file %d from %s", shard.index, shard.url)
        self._enter(ShardState.OPENING, shard)
        try:
            response = self.session.get(shard.url, stream=True, timeout=self._timeout)
        except requests.RequestException as exc:
            self._enter(ShardState.CLOSED, shard)
            raise TransportError(f"request for {shard.url} failed: {exc}") from exc

        try:
            if not 200 <= response.status_code < 300:
                raise TransportError(
                    f"unexpected response for {shard.url}: {response.status_code} {response.reason}"
                )

            length = content_length(response)
            logger.info("File %d has %s bytes", shard.index, length if length is not None else "unknown")
            return self._stream(response.raw, shard, length, on_abort=lambda: self._abort(response))
        finally:
            response.close()
            self._enter(ShardState.CLOSED, shard)

    def process_stream(
        self,
        stream: BinaryIO,
        shard: ShardDescriptor,
        length: int | None = None,
        on_abort: Callable[[], None] | None = None,
    ) -> ShardSummary:
        """Decompress, parse and evaluate every line of a gzip stream.

        on_abort runs before any exception propagates.
        """
        try:
            return self._stream(stream, shard, length, on_abort)
        finally:
            self._enter(ShardState.CLOSED, shard)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stream(
        self,
        stream: BinaryIO,
        shard: ShardDescriptor,
        length: int | None,
        on_abort: Callable[[], None] | None,
    ) -> ShardSummary:
        mime_before = self.evaluator.matched_by_mime
        url_before = self.evaluator.matched_by_url
        with LineStream(stream, total_length=length, buffer_size=self._buffer_size) as lines:
            self._enter(ShardState.STREAMING, shard)
            try:
                count = self._consume(lines, shard, length)
            except Urllib3HTTPError as exc:
                self._fail(shard, exc, on_abort)
                raise TransportError(f"reading {shard.url} failed: {exc}") from exc
            except Exception as exc:
                self._fail(shard, exc, on_abort)
                raise
            self._enter(ShardState.DRAINING, shard)
            logger.info("End of stream reached for %s after %d lines", shard.url, count)
            progress = lines.progress

        return ShardSummary(
            index=shard.index,
            url=shard.url,
            lines=count,
            matched_by_mime=self.evaluator.matched_by_mime - mime_before,
            matched_by_url=self.evaluator.matched_by_url - url_before,
            progress=progress,
        )

    def _consume(self, lines: LineStream, shard: ShardDescriptor, length: int | None) -> int:
        count = 0
        last_log = self._clock()
        for line in lines:
            record = parse_record(line)
            fields = scan_payload(record.payload)
            self.evaluator.evaluate(line, fields)

            count += 1
            now = self._clock()
            if count % self._log_every_lines == 0 or now - last_log > self._log_every_seconds:
                self._log_progress(shard, count, lines.progress, length)
                last_log = now
        return count

    def _log_progress(
        self, shard: ShardDescriptor, count: int, progress: ByteProgress, length: int | None
    ) -> None:
        logger.info(
            "File %d: %d lines, compressed bytes: %d of %s (%.2f%%), bytes: %d: %s",
            shard.index,
            count,
            progress.compressed_bytes_read,
            length if length is not None else "unknown",
            progress.percent,
            progress.decompressed_bytes_read,
            self.evaluator.counter.snapshot(100),
        )

    def _fail(
        self, shard: ShardDescriptor, exc: BaseException, on_abort: Callable[[], None] | None
    ) -> None:
        self._enter(ShardState.ABORTING, shard)
        logger.warning("Aborting file %d (%s): %s", shard.index, type(exc).__name__, exc)
        if on_abort is not None:
            on_abort()

    def _abort(self, response: requests.Response) -> None:
        # close the socket itself; releasing the response normally would drain the body
        logger.debug("Closing connection for %s", response.url)
        response.raw.close()

    def _enter(self, state: ShardState, shard: ShardDescriptor) -> None:
        if self.state is not state:
            logger.debug("File %d: %s -> %s", shard.index, self.state.value, state.value)
        self.state = state
