"""Record types shared by the CDX line parser and the payload scanner."""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class CdxRecord(NamedTuple):
    """One CDX index line: ``<url_key> <timestamp> <json payload>``."""

    url_key: str
    timestamp: str
    payload: str


@dataclass(frozen=True)
class PayloadFields:
    """The two payload fields the filters care about, lower-cased.

    The payload also carries status, digest, length, offset and filename;
    those are never parsed.
    """

    mime: str | None = None
    url: str | None = None
