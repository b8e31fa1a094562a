"""Enumerate the cdx-NNNNN.gz shard URLs of a crawl."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .config import Settings

URL_FORMAT = "{base_url}/cc-index/collections/{crawl_id}/indexes/cdx-{index:05d}.gz"


@dataclass(frozen=True)
class ShardDescriptor:
    index: int
    url: str


def shard_url(base_url: str, crawl_id: str, index: int) -> str:
    return URL_FORMAT.format(base_url=base_url.rstrip("/"), crawl_id=crawl_id, index=index)


def iter_shards(settings: Settings) -> Iterator[ShardDescriptor]:
    """Yield shards from start_index to end_index inclusive, in ascending order."""
    if settings.start_index < 0:
        raise ValueError(f"start_index must be >= 0, got {settings.start_index}")
    if settings.end_index < settings.start_index:
        raise ValueError(
            f"end_index {settings.end_index} is before start_index {settings.start_index}"
        )
    for index in range(settings.start_index, settings.end_index + 1):
        yield ShardDescriptor(index=index, url=shard_url(settings.base_url, settings.crawl_id, index))
