"""
OneTab store value decoder.

Values are decoded in two explicit stages instead of trying parses until one
sticks:

1. Parse the text as JSON. An object is a DIRECT_OBJECT.
2. A JSON string literal, or text that only parses once wrapped in quotes
   (an escaped payload stored without its surrounding quotes), gets exactly
   one more unescape pass. An object inside is an ESCAPED_STRING.

Anything else is UNRECOGNIZED. Group and tab objects are then converted into
the canonical model by ``parse_group``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.logging import get_logger
from core.models import Tab, TabGroup
from core.timestamps import ms_to_datetime
from core.urls import InvalidUrl, parse_url
from extractors.exceptions import MalformedRecord

from ._schemas import GROUP_FLAGS, KNOWN_GROUP_KEYS, KNOWN_TAB_KEYS, ROOT_KEY

LOGGER = get_logger("extractors.browser.chromium.tab_groups")


class DecodedKind(Enum):
    DIRECT_OBJECT = "direct_object"
    ESCAPED_STRING = "escaped_string"
    UNRECOGNIZED = "unrecognized"


@dataclass(slots=True, frozen=True)
class DecodedValue:
    kind: DecodedKind
    payload: Optional[Dict[str, Any]] = None

    @property
    def recognized(self) -> bool:
        return self.kind is not DecodedKind.UNRECOGNIZED


_UNRECOGNIZED = DecodedValue(DecodedKind.UNRECOGNIZED)


def _parse_json(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return False, None


def _unescape_once(literal: str) -> DecodedValue:
    ok, inner = _parse_json(literal)
    if ok and isinstance(inner, dict):
        return DecodedValue(DecodedKind.ESCAPED_STRING, inner)
    return _UNRECOGNIZED


def decode_value(text: str) -> DecodedValue:
    """
    Decode a raw store value into a JSON object.

    Example:
        >>> decode_value('{"tabGroups": []}').kind
        <DecodedKind.DIRECT_OBJECT: 'direct_object'>
    """
    ok, first = _parse_json(text)
    if ok:
        if isinstance(first, dict):
            return DecodedValue(DecodedKind.DIRECT_OBJECT, first)
        if isinstance(first, str):
            return _unescape_once(first)
        return _UNRECOGNIZED

    ok, quoted = _parse_json(f'"{text}"')
    if ok and isinstance(quoted, str):
        return _unescape_once(quoted)
    return _UNRECOGNIZED


def group_objects(payload: Dict[str, Any]) -> List[Any]:
    """Return the raw group array of a decoded payload."""
    groups = payload.get(ROOT_KEY)
    if not isinstance(groups, list):
        raise MalformedRecord(ROOT_KEY, f"expected an array, got {type(groups).__name__}")
    return groups


def _identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int):
        return str(value)
    return None


def parse_group(raw: Any) -> Optional[TabGroup]:
    """
    Convert one raw group object into a TabGroup.

    Tabs with a missing identifier or an unparseable URL are dropped one by
    one. Returns ``None`` when no tab survives.

    Raises:
        MalformedRecord: the group itself lacks an id, a numeric createDate
            or a tabsMeta array
    """
    if not isinstance(raw, dict):
        raise MalformedRecord("<group>", f"expected an object, got {type(raw).__name__}")

    group_id = _identifier(raw.get("id"))
    if group_id is None:
        raise MalformedRecord("<group>", "missing group id")

    create_date = raw.get("createDate")
    if isinstance(create_date, bool) or not isinstance(create_date, (int, float)):
        raise MalformedRecord(group_id, "missing or non-numeric createDate")

    tabs_meta = raw.get("tabsMeta")
    if not isinstance(tabs_meta, list):
        raise MalformedRecord(group_id, "missing tabsMeta array")

    unknown = set(raw) - KNOWN_GROUP_KEYS
    if unknown:
        LOGGER.debug("Group %s has unknown keys: %s", group_id, sorted(unknown))

    created_at = ms_to_datetime(create_date)
    tabs: List[Tab] = []
    for index, tab_raw in enumerate(tabs_meta):
        tab = _parse_tab(tab_raw, created_at)
        if tab is None:
            LOGGER.warning("Dropped tab %d of group %s: missing id or unparseable URL", index, group_id)
            continue
        tabs.append(tab)

    if not tabs:
        LOGGER.warning("Dropped group %s: no valid tabs", group_id)
        return None

    label = raw.get("title")
    return TabGroup(
        id=group_id,
        created_at=created_at,
        tabs=tabs,
        label=label if isinstance(label, str) and label else None,
        **{flag: raw.get(flag) is True for flag in GROUP_FLAGS},
    )


def _parse_tab(raw: Any, added_at) -> Optional[Tab]:
    if not isinstance(raw, dict):
        return None
    tab_id = _identifier(raw.get("id"))
    url = raw.get("url")
    if tab_id is None or not isinstance(url, str):
        return None
    unknown = set(raw) - KNOWN_TAB_KEYS
    if unknown:
        LOGGER.debug("Tab %s has unknown keys: %s", tab_id, sorted(unknown))
    try:
        canonical = parse_url(url)
    except InvalidUrl as exc:
        LOGGER.debug("Skipping tab %s: %s", tab_id, exc)
        return None

    title = raw.get("title")
    favicon = raw.get("favicon")
    return Tab(
        id=tab_id,
        url=canonical,
        title=title if isinstance(title, str) else "",
        added_at=added_at,
        favicon_url=favicon if isinstance(favicon, str) and favicon else None,
    )
