"""CDX line parser — splits a line at its first two spaces."""
from __future__ import annotations

from ..errors import MalformedRecordError
from .base import CdxRecord


def parse_record(line: str) -> CdxRecord:
    """Split a CDX line into url key, timestamp and payload.

    Spaces inside the payload are kept. A line without two spaces raises
    MalformedRecordError; such a feed is not trusted for the rest of the shard.
    """
    end_of_url = line.find(" ")
    if end_of_url == -1:
        raise MalformedRecordError("could not find end of url", line)
    end_of_timestamp = line.find(" ", end_of_url + 1)
    if end_of_timestamp == -1:
        raise MalformedRecordError("could not find end of timestamp", line)
    return CdxRecord(
        url_key=line[:end_of_url],
        timestamp=line[end_of_url + 1:end_of_timestamp],
        payload=line[end_of_timestamp + 1:],
    )
