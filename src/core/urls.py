"""
URL parsing for the canonical tab model.

A tab's URL must always be an absolute URL in canonical form. ``parse_url``
is the single gate every producer goes through; a string it rejects never
enters the model.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

# Schemes that require a host, following the WHATWG "special scheme" list.
SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_HOST_FORBIDDEN_RE = re.compile(r"[\s<>^|\\\"`{}]")
_CONTROL_RE = re.compile(r"[\t\r\n]")


class InvalidUrl(ValueError):
    """Raised when a string is not a valid absolute URL."""


def parse_url(raw: str) -> str:
    """
    Validate ``raw`` as an absolute URL and return its canonical form.

    The canonical form lowercases the scheme and host, drops a default port,
    writes the empty path of a special-scheme URL as ``/`` and percent-encodes
    embedded spaces. Query and fragment are kept verbatim.

    Raises:
        InvalidUrl: if ``raw`` has no valid scheme, or a special-scheme URL
            has no host or an invalid port.

    Example:
        >>> parse_url("HTTPS://Example.COM:443")
        'https://example.com/'
    """
    if not isinstance(raw, str):
        raise InvalidUrl(f"URL must be a string, got {type(raw).__name__}")

    candidate = _CONTROL_RE.sub("", raw.strip())
    if not candidate:
        raise InvalidUrl("empty URL")

    scheme, sep, _rest = candidate.partition(":")
    if not sep or not _SCHEME_RE.match(scheme):
        raise InvalidUrl(f"missing or invalid scheme: {raw!r}")

    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrl(f"unparseable URL {raw!r}: {exc}") from exc

    scheme = parts.scheme.lower()
    netloc = parts.netloc
    path = parts.path

    if scheme in SPECIAL_SCHEMES or netloc:
        netloc = _canonical_netloc(parts, scheme, raw)
    elif not path and not parts.query and not parts.fragment:
        raise InvalidUrl(f"URL has nothing after its scheme: {raw!r}")

    if scheme in SPECIAL_SCHEMES and not path:
        path = "/"

    return urlunsplit((
        scheme,
        netloc,
        path.replace(" ", "%20"),
        parts.query.replace(" ", "%20"),
        parts.fragment.replace(" ", "%20"),
    ))


def _canonical_netloc(parts, scheme: str, raw: str) -> str:
    try:
        hostname = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(f"invalid port in {raw!r}: {exc}") from exc

    if scheme in SPECIAL_SCHEMES and not hostname:
        raise InvalidUrl(f"URL has no host: {raw!r}")
    if hostname and _HOST_FORBIDDEN_RE.search(hostname):
        raise InvalidUrl(f"invalid host in {raw!r}")

    host = hostname or ""
    if ":" in host:
        host = f"[{host}]"  # IPv6 literal

    userinfo = ""
    if "@" in parts.netloc:
        userinfo = parts.netloc.rsplit("@", 1)[0] + "@"

    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        return f"{userinfo}{host}:{port}"
    return f"{userinfo}{host}"


def try_parse_url(raw: str) -> Optional[str]:
    """Return the canonical URL, or ``None`` when ``raw`` does not parse."""
    try:
        return parse_url(raw)
    except InvalidUrl:
        return None


def url_host(url: str) -> Optional[str]:
    """Return the lowercase host of ``url``, or ``None`` when it has none."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None
    return hostname or None
