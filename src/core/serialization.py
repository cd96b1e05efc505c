"""
Canonical session serialization.

The JSON form mirrors the model field for field, with every timestamp as
epoch milliseconds:

    {"version": 1,
     "source": {"kind": "browser", "browser": "chrome", "profile": "Default"},
     "groups": [{"id": ..., "label": ..., "created_at": 1760074389851,
                 "pinned": false, "locked": false, "starred": false,
                 "tabs": [{"id": ..., "url": ..., "title": ...,
                           "favicon_url": null, "added_at": 1760074389851}]}],
     "created_at": ..., "imported_at": ...}
"""
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

from .enums import Browser, SourceKind
from .logging import get_logger
from .models import Session, SessionSource, Tab, TabGroup
from .timestamps import datetime_to_ms, ms_to_datetime, utc_now
from .urls import InvalidUrl, parse_url

LOGGER = get_logger("core.serialization")


def source_to_dict(source: SessionSource) -> Dict[str, Any]:
    data: Dict[str, Any] = {"kind": source.kind.value}
    if source.kind is SourceKind.BROWSER:
        data["browser"] = source.browser.value if source.browser else None
        data["profile"] = source.profile
    elif source.path is not None:
        data["path"] = str(source.path)
    return data


def source_from_dict(data: Dict[str, Any]) -> SessionSource:
    kind = SourceKind(data.get("kind", SourceKind.UNKNOWN.value))
    if kind is SourceKind.BROWSER:
        return SessionSource.from_browser(Browser(data["browser"]), data.get("profile") or "Default")
    if kind is SourceKind.EXPORT_FILE:
        return SessionSource.from_export_file(Path(data["path"]))
    if kind is SourceKind.NATIVE:
        return SessionSource.from_native(Path(data["path"]))
    return SessionSource.unknown()


def session_to_dict(session: Session) -> Dict[str, Any]:
    return {
        "version": session.version,
        "source": source_to_dict(session.source),
        "groups": [group_to_dict(group) for group in session.groups],
        "created_at": datetime_to_ms(session.created_at),
        "imported_at": datetime_to_ms(session.imported_at),
    }


def group_to_dict(group: TabGroup) -> Dict[str, Any]:
    return {
        "id": group.id,
        "label": group.label,
        "created_at": datetime_to_ms(group.created_at),
        "tabs": [
            {
                "id": tab.id,
                "url": tab.url,
                "title": tab.title,
                "favicon_url": tab.favicon_url,
                "added_at": datetime_to_ms(tab.added_at),
            }
            for tab in group.tabs
        ],
        "pinned": group.pinned,
        "locked": group.locked,
        "starred": group.starred,
    }


def session_from_dict(data: Dict[str, Any]) -> Session:
    """
    Rebuild a Session from its canonical dict.

    Tabs whose URL no longer parses are dropped with a warning.

    Raises:
        ValueError: missing or mistyped required fields
    """
    if not isinstance(data, dict):
        raise ValueError("Session data must be a JSON object")
    try:
        groups: List[TabGroup] = [_group_from_dict(raw) for raw in data["groups"]]
        return Session(
            version=int(data["version"]),
            source=source_from_dict(data.get("source") or {}),
            groups=groups,
            created_at=ms_to_datetime(data["created_at"]),
            imported_at=ms_to_datetime(data.get("imported_at", data["created_at"])),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid session data: {exc!r}") from exc


def _group_from_dict(raw: Dict[str, Any]) -> TabGroup:
    tabs: List[Tab] = []
    for tab in raw.get("tabs", []):
        try:
            url = parse_url(tab["url"])
        except InvalidUrl as exc:
            LOGGER.warning("Dropping tab %s of group %s: %s", tab.get("id"), raw.get("id"), exc)
            continue
        tabs.append(
            Tab(
                id=str(tab["id"]),
                url=url,
                title=tab.get("title") or "",
                favicon_url=tab.get("favicon_url"),
                added_at=ms_to_datetime(tab["added_at"]),
            )
        )
    return TabGroup(
        id=str(raw["id"]),
        label=raw.get("label"),
        created_at=ms_to_datetime(raw["created_at"]),
        tabs=tabs,
        pinned=bool(raw.get("pinned", False)),
        locked=bool(raw.get("locked", False)),
        starred=bool(raw.get("starred", False)),
    )


def dumps_session(session: Session) -> str:
    return json.dumps(session_to_dict(session), indent=2, ensure_ascii=False)


def write_session_json(session: Session, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_session(session) + "\n", encoding="utf-8")
    LOGGER.info("Wrote %d group(s) to %s", len(session.groups), path)
    return path


def read_session_json(path: Path) -> Session:
    """
    Load a canonical session file.

    Raises:
        ValueError: the file is not valid canonical JSON
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    return session_from_dict(data)


def read_native_session(path: Path) -> Session:
    """Load a canonical session file and tag it with a native source."""
    session = read_session_json(path)
    return replace(session, source=SessionSource.from_native(Path(path)), imported_at=utc_now())
