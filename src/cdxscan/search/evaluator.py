"""Decide which CDX lines are written to the sink."""
from __future__ import annotations

import logging

from ..aggregators.counter import MimeTypeCounter
from ..parsers.base import PayloadFields
from ..sink import Sink
from .matchers import Predicate

logger = logging.getLogger(__name__)


class MatchEvaluator:
    """Count MIME types and append lines that match by MIME type or by URL.

    The two checks are independent: a line matching both is appended twice.
    """

    def __init__(
        self,
        url_matcher: Predicate,
        mime_matcher: Predicate,
        counter: MimeTypeCounter,
        sink: Sink,
    ) -> None:
        self._url_matcher = url_matcher
        self._mime_matcher = mime_matcher
        self.counter = counter
        self._sink = sink
        self.matched_by_mime = 0
        self.matched_by_url = 0

    def evaluate(self, line: str, fields: PayloadFields) -> None:
        if fields.mime is not None:
            self.counter.add(fields.mime)
            if self._mime_matcher(fields.mime):
                logger.info("Found-Mimetype: %s", line)
                self._sink.append(line)
                self.matched_by_mime += 1

        if fields.url is not None and self._url_matcher(fields.url):
            logger.info("Found-URL: %s", line)
            self._sink.append(line)
            self.matched_by_url += 1
