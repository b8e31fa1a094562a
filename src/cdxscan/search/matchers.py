"""URL-extension and MIME-type predicates used to select CDX records."""
from __future__ import annotations

import re
from typing import Callable, Iterable
from urllib.parse import urlsplit

Predicate = Callable[[str], bool]


class ExtensionMatcher:
    """Match URLs whose path ends in one of the given file extensions.

    The query string and fragment are ignored, as is case::

        ExtensionMatcher([".doc", "xls"])("http://a.org/x.DOC?dl=1")  # True
    """

    def __init__(self, extensions: Iterable[str]) -> None:
        exts = sorted({e.lower().lstrip(".") for e in extensions if e.strip(". ")})
        if not exts:
            raise ValueError("at least one extension is required")
        self._regex = re.compile(
            r"\.(?:" + "|".join(re.escape(e) for e in exts) + r")$",
            re.IGNORECASE,
        )

    def __call__(self, url: str) -> bool:
        path = urlsplit(url).path
        return self._regex.search(path) is not None

    def __repr__(self) -> str:
        return f"ExtensionMatcher({self._regex.pattern!r})"


class MimeTypeMatcher:
    """Match MIME types against a fixed set; ``type/*``-style entries match by prefix."""

    def __init__(self, mime_types: Iterable[str]) -> None:
        self._exact: set[str] = set()
        self._prefixes: list[str] = []
        for mime_type in mime_types:
            mime_type = mime_type.strip().lower()
            if not mime_type:
                continue
            if mime_type.endswith("*"):
                self._prefixes.append(mime_type[:-1])
            else:
                self._exact.add(mime_type)

    def __call__(self, mime_type: str) -> bool:
        mime_type = mime_type.lower()
        if mime_type in self._exact:
            return True
        return any(mime_type.startswith(p) for p in self._prefixes)

    def __repr__(self) -> str:
        return f"MimeTypeMatcher({len(self._exact)} types, {len(self._prefixes)} prefixes)"
