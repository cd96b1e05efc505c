"""
Title and URL normalization used for duplicate detection.

Neither function is applied to stored data implicitly; the dedup engine
compares normalized keys while keeping the original tabs.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import replace
from typing import List
from urllib.parse import urlsplit, urlunsplit

from .models import Session, TabGroup

TRACKING_PARAM_PREFIX = "utm_"

# Site name suffixes appended to page titles
TITLE_SUFFIXES = (
    " - Google Search",
    " | Twitter",
    " on X",
    " - YouTube",
    " on YouTube",
    " - Wikipedia",
    " - Reddit",
    " | LinkedIn",
    " - Stack Overflow",
    " | GitHub",
    " | daily.dev",
    " | DEV Community",
    " | Hacker News",
    " | Medium",
    " – Frontend Masters Blog",
    " | InfoWorld",
    " | Product Hunt",
)
_SUFFIXES_LONGEST_FIRST = tuple(sorted(TITLE_SUFFIXES, key=len, reverse=True))

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """
    Canonical title for comparison.

    NFC-normalizes, collapses whitespace and strips known site suffixes
    (repeatedly, longest match first).

    Example:
        >>> normalize_title("  Rust   Book - Wikipedia - Reddit ")
        'Rust Book'
    """
    text = _WHITESPACE_RE.sub(" ", unicodedata.normalize("NFC", title).strip())
    while True:
        for suffix in _SUFFIXES_LONGEST_FIRST:
            if text.endswith(suffix):
                text = text[: -len(suffix)]
                break
        else:
            break
    return text.strip()


def normalize_url(url: str) -> str:
    """
    Canonical URL for duplicate detection.

    Lowercases scheme and host, drops the fragment and ``utm_*`` parameters,
    sorts the remaining parameters by name and removes one trailing slash
    from any path other than ``/``.

    Example:
        >>> normalize_url("HTTPS://Example.com/post/?utm_source=x&b=2&a=1#top")
        'https://example.com/post?a=1&b=2'
    """
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError:
        return url.lower()
    if not parts.scheme:
        return url.lower()

    netloc = parts.netloc
    if hostname:
        userinfo, _, hostport = netloc.rpartition("@")
        netloc = (userinfo + "@" if userinfo else "") + hostport.lower()

    params = [
        pair for pair in parts.query.split("&")
        if pair and not pair.split("=", 1)[0].startswith(TRACKING_PARAM_PREFIX)
    ]
    params.sort(key=lambda pair: pair.split("=", 1)[0])
    query = "&".join(params)

    path = parts.path
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((parts.scheme.lower(), netloc, path, query, ""))


def normalize_session_titles(session: Session) -> Session:
    """Return a copy of ``session`` with every tab title normalized."""
    groups: List[TabGroup] = [
        replace(group, tabs=[replace(tab, title=normalize_title(tab.title)) for tab in group.tabs])
        for group in session.groups
    ]
    return replace(session, groups=groups)
