"""Event-level scanner for the JSON payload of a CDX record.

Payloads look like::

    {"url": "...", "mime": "text/html", "status": "200", "digest": "...",
     "length": "1234", "offset": "5678", "filename": "crawl-data/..."}

There are hundreds of millions of them per crawl, so no dict is built: the
scanner pulls ijson events and keeps only ``mime`` and ``url``.
"""
from __future__ import annotations

import ijson

from ..errors import PayloadParseError
from .base import PayloadFields

_WANTED = frozenset({"mime", "url"})


def scan_payload(payload: str) -> PayloadFields:
    """Return the lower-cased top-level ``mime`` and ``url`` string values.

    Stops at the closing brace of the top-level object. Raises
    PayloadParseError when the payload is not a JSON object or is malformed.
    """
    found: dict[str, str] = {}
    try:
        events = ijson.parse(payload.encode("utf-8"))
        prefix, event, _ = next(events)
        if prefix != "" or event != "start_map":
            raise PayloadParseError(f"expected a JSON object, got {event}", payload)
        for prefix, event, value in events:
            if event == "end_map" and prefix == "":
                break
            if event == "string" and prefix in _WANTED:
                found[prefix] = value.lower()
        else:
            raise PayloadParseError("unterminated JSON object", payload)
    except StopIteration:
        raise PayloadParseError("empty payload", payload) from None
    except ijson.JSONError as exc:
        raise PayloadParseError(f"invalid JSON payload: {exc}", payload) from exc
    return PayloadFields(mime=found.get("mime"), url=found.get("url"))
