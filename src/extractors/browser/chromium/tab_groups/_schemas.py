"""
OneTab extension store schema definitions.

OneTab keeps its whole state in one JSON value inside the extension's
``Local Extension Settings`` LevelDB. Depending on the extension version the
value is either the object itself or a JSON string literal containing it
(double-encoded).

Structure:
    {"tabGroups": [
        {"id": "...", "createDate": <epoch ms>, "title": "...",
         "pinned": bool, "locked": bool, "starred": bool,
         "tabsMeta": [{"id": "...", "url": "...", "title": "...", "favicon": "..."}]}
    ]}
"""

from __future__ import annotations

from typing import Set

# Substring that marks a value worth decoding
TAB_GROUPS_MARKER = "tabGroups"

ROOT_KEY = "tabGroups"

KNOWN_GROUP_KEYS: Set[str] = {
    "id",
    "createDate",   # epoch milliseconds
    "tabsMeta",
    "title",        # optional user label
    "pinned",
    "locked",
    "starred",
}

KNOWN_TAB_KEYS: Set[str] = {
    "id",
    "url",
    "title",
    "favicon",
}

GROUP_FLAGS = ("pinned", "locked", "starred")
