"""Session builders and fake LevelDB stores for tests."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Iterable, List, Optional

import pytest

from core.models import SESSION_VERSION, Session, SessionSource, Tab, TabGroup

FIXED_TIME = datetime(2025, 10, 10, 5, 33, 9, 851000, tzinfo=timezone.utc)
FIXED_MS = 1760074389851


def make_tab(tab_id: str, url: str, title: str = "", favicon_url: Optional[str] = None) -> Tab:
    return Tab(id=tab_id, url=url, title=title, added_at=FIXED_TIME, favicon_url=favicon_url)


def make_group(group_id: str, tabs: Iterable[Tab], label: Optional[str] = None, created_at: datetime = FIXED_TIME) -> TabGroup:
    return TabGroup(id=group_id, created_at=created_at, tabs=list(tabs), label=label)


def make_session(groups: Iterable[TabGroup], source: Optional[SessionSource] = None) -> Session:
    return Session(
        version=SESSION_VERSION,
        source=source or SessionSource.from_export_file(Path("export.txt")),
        groups=list(groups),
        created_at=FIXED_TIME,
        imported_at=FIXED_TIME,
    )


def onetab_payload(groups: List[dict]) -> dict:
    return {"tabGroups": groups}


def onetab_group(group_id: str, tabs: List[dict], create_date: int = FIXED_MS, **extra) -> dict:
    data = {"id": group_id, "createDate": create_date, "tabsMeta": tabs}
    data.update(extra)
    return data


def fake_record(user_key: bytes, value: bytes, seq: int, state=None):
    """Build a SimpleNamespace mimicking a ccl_leveldb Record."""
    return SimpleNamespace(user_key=user_key, value=value, seq=seq, state=state)


DELETED = SimpleNamespace(name="Deleted")
LIVE = SimpleNamespace(name="Live")


class FakeRawLevelDb:
    """
    Fake RawLevelDb yielding a fixed sequence of records, optionally raising
    a ValueError at a given position.
    """

    def __init__(self, records, error_at=None, error_msg="999 is not a valid KeyState"):
        self._records = list(records)
        self._error_at = error_at
        self._error_msg = error_msg
        self.closed = False

    def iterate_records_raw(self):
        for i, rec in enumerate(self._records):
            if self._error_at is not None and i == self._error_at:
                raise ValueError(self._error_msg)
            yield rec

    def close(self):
        self.closed = True


@pytest.fixture
def session_factory() -> Callable[..., Session]:
    """Build a one-group session from (id, url, title) triples."""

    def _create(tabs=(("t1", "https://a.com/", "A"), ("t2", "https://b.com/", "B")), group_id="g1", label=None):
        return make_session([make_group(group_id, [make_tab(*spec) for spec in tabs], label=label)])

    return _create


@pytest.fixture
def onetab_value() -> Callable[..., bytes]:
    """Encode a OneTab payload as a store value, optionally double-encoded."""

    def _encode(groups: List[dict], double_encoded: bool = False) -> bytes:
        text = json.dumps(onetab_payload(groups))
        if double_encoded:
            text = json.dumps(text)
        return text.encode("utf-8")

    return _encode
