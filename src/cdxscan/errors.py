"""Exception hierarchy for the scan pipeline.

Every error here is fatal: the driver closes the current connection and the
whole run stops. Nothing is retried or downgraded to a warning.
"""
from __future__ import annotations


class CdxScanError(Exception):
    """Base class for all cdxscan failures."""


class TransportError(CdxScanError):
    """Connection failure, non-2xx response or read timeout."""


class DecodeError(CdxScanError):
    """Corrupt or truncated gzip data in a shard."""


class MalformedRecordError(CdxScanError):
    """A CDX line lacks the url-key / timestamp delimiters."""

    def __init__(self, message: str, line: str) -> None:
        super().__init__(message)
        self.line = line


class PayloadParseError(CdxScanError):
    """The JSON payload of a CDX line is not a flat object."""

    def __init__(self, message: str, payload: str) -> None:
        super().__init__(message)
        self.payload = payload


class SinkWriteError(CdxScanError):
    """Appending a matched line to the output file failed."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path
