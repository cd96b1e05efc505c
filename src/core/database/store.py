"""
Durable tab store.

This module provides:
- TabStore: insert-once import of Sessions plus read/search/maintenance queries
- InsertStats / StoreStats: result records
- TransactionFailure: raised when an import cannot be committed

Imports run as one transaction per Session. Groups and tabs are keyed by
their identifiers and inserted with INSERT OR IGNORE, so importing the same
Session again inserts nothing.
"""
from __future__ import annotations

import sqlite3
import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from core.enums import SourceKind
from core.logging import get_logger
from core.models import SESSION_VERSION, Session, SessionSource, Tab, TabGroup, TOP_DOMAIN_LIMIT
from core.timestamps import datetime_to_ms, ms_to_datetime, utc_now
from core.urls import url_host

from .connection import open_db

__all__ = [
    "TabStore",
    "InsertStats",
    "StoreStats",
    "TransactionFailure",
    "DB_FILE_NAME",
]

LOGGER = get_logger("core.database.store")

DB_FILE_NAME = "tabs.db"
MANUAL_SOURCE_TYPE = "manual"

_GROUP_COLUMNS = "id, label, created_at, pinned, locked, starred, source_type, source_profile, source_path"
_TAB_COLUMNS = "id, group_id, url, title, favicon_url, added_at, position"


class TransactionFailure(RuntimeError):
    """An import transaction failed and was rolled back."""


@dataclass(slots=True)
class InsertStats:
    groups_inserted: int = 0
    groups_skipped: int = 0
    tabs_inserted: int = 0
    tabs_skipped: int = 0


@dataclass(slots=True)
class StoreStats:
    total_groups: int
    total_tabs: int
    oldest_group: Optional[datetime] = None
    newest_group: Optional[datetime] = None
    top_domains: List[Tuple[str, int]] = field(default_factory=list)


def _source_columns(source: SessionSource) -> Tuple[str, Optional[str], Optional[str]]:
    if source.kind is SourceKind.BROWSER and source.browser is not None:
        return source.browser.value, source.profile, None
    path = str(source.path) if source.path is not None else None
    return source.kind.value, None, path


def _group_params(group: TabGroup, source_type: str, profile: Optional[str], path: Optional[str]) -> tuple:
    return (
        group.id,
        group.label,
        datetime_to_ms(group.created_at),
        int(group.pinned),
        int(group.locked),
        int(group.starred),
        source_type,
        profile,
        path,
    )


def _tab_params(tab: Tab, group_id: str, position: int) -> tuple:
    return (
        tab.id,
        group_id,
        tab.url,
        tab.title,
        tab.favicon_url,
        datetime_to_ms(tab.added_at),
        position,
    )


def _row_to_tab(row: sqlite3.Row) -> Tab:
    return Tab(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        favicon_url=row["favicon_url"],
        added_at=ms_to_datetime(row["added_at"]),
    )


def _row_to_group(row: sqlite3.Row, tabs: List[Tab]) -> TabGroup:
    return TabGroup(
        id=row["id"],
        label=row["label"],
        created_at=ms_to_datetime(row["created_at"]),
        tabs=tabs,
        pinned=bool(row["pinned"]),
        locked=bool(row["locked"]),
        starred=bool(row["starred"]),
    )


def _like_pattern(needle: str) -> str:
    escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TabStore:
    """
    SQLite-backed store of tab groups.

    One connection per store; writes are serialized with a lock so a
    long-lived process can accept imports from several callers.
    """

    def __init__(self, conn: sqlite3.Connection, db_path: Optional[Path] = None):
        self._conn = conn
        self.db_path = db_path
        self._lock = threading.Lock()

    @classmethod
    def open(cls, db_path: Path | str) -> "TabStore":
        """Open (or create) the store at ``db_path`` and apply migrations."""
        conn = open_db(db_path)
        path = None if str(db_path) == ":memory:" else Path(db_path)
        return cls(conn, path)

    @classmethod
    def open_default(cls, data_dir: Path) -> "TabStore":
        """Open ``<data_dir>/tabs.db``."""
        return cls.open(Path(data_dir) / DB_FILE_NAME)

    @classmethod
    def in_memory(cls) -> "TabStore":
        return cls.open(":memory:")

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "TabStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_session(self, session: Session) -> InsertStats:
        """
        Import ``session`` in one transaction.

        A group already present counts all of its tabs as skipped without
        touching them.

        Raises:
            TransactionFailure: any storage error; nothing is committed
        """
        stats = InsertStats()
        source_type, profile, path = _source_columns(session.source)

        with self._lock:
            try:
                with self._conn:
                    for group in session.groups:
                        cursor = self._conn.execute(
                            f"INSERT OR IGNORE INTO tab_groups ({_GROUP_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                            _group_params(group, source_type, profile, path),
                        )
                        if cursor.rowcount <= 0:
                            stats.groups_skipped += 1
                            stats.tabs_skipped += group.tab_count
                            continue

                        stats.groups_inserted += 1
                        for position, tab in enumerate(group.tabs):
                            cursor = self._conn.execute(
                                f"INSERT OR IGNORE INTO tabs ({_TAB_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                                _tab_params(tab, group.id, position),
                            )
                            if cursor.rowcount > 0:
                                stats.tabs_inserted += 1
                            else:
                                stats.tabs_skipped += 1
            except sqlite3.Error as exc:
                LOGGER.error("Import of %s rolled back: %s", session.source.describe(), exc)
                raise TransactionFailure(f"Failed to import session: {exc}") from exc

        LOGGER.info(
            "Imported %s: groups %d inserted / %d skipped, tabs %d inserted / %d skipped",
            session.source.describe(),
            stats.groups_inserted,
            stats.groups_skipped,
            stats.tabs_inserted,
            stats.tabs_skipped,
        )
        return stats

    def insert_group(self, group: TabGroup) -> None:
        """
        Insert a single group and its tabs, tagged as a manual entry.

        Raises:
            sqlite3.IntegrityError: a group with this id already exists
        """
        with self._lock, self._conn:
            self._conn.execute(
                f"INSERT INTO tab_groups ({_GROUP_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _group_params(group, MANUAL_SOURCE_TYPE, None, None),
            )
            self._conn.executemany(
                f"INSERT OR IGNORE INTO tabs ({_TAB_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                [_tab_params(tab, group.id, position) for position, tab in enumerate(group.tabs)],
            )

    def delete_group(self, group_id: str) -> bool:
        """Delete a group and (by cascade) its tabs. Returns True if it existed."""
        with self._lock, self._conn:
            cursor = self._conn.execute("DELETE FROM tab_groups WHERE id = ?", (group_id,))
        return cursor.rowcount > 0

    def replace_tabs_for_group(self, group_id: str, tabs: Iterable[Tab]) -> int:
        """
        Replace the tabs of an existing group, renumbering positions.

        Returns:
            Number of tabs written
        """
        rows = [_tab_params(tab, group_id, position) for position, tab in enumerate(tabs)]
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM tabs WHERE group_id = ?", (group_id,))
            self._conn.executemany(
                f"INSERT OR REPLACE INTO tabs ({_TAB_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_tabs_for_group(self, group_id: str) -> List[Tab]:
        rows = self._conn.execute(
            "SELECT id, url, title, favicon_url, added_at FROM tabs WHERE group_id = ? ORDER BY position, id",
            (group_id,),
        ).fetchall()
        return [_row_to_tab(row) for row in rows]

    def get_all_groups(self) -> List[TabGroup]:
        """All groups, newest first, each with its tabs in saved order."""
        rows = self._conn.execute(
            f"SELECT {_GROUP_COLUMNS} FROM tab_groups ORDER BY created_at DESC, id"
        ).fetchall()
        return [_row_to_group(row, self.get_tabs_for_group(row["id"])) for row in rows]

    def get_session(self) -> Session:
        """Everything in the store as one Session with an unknown source."""
        groups = self.get_all_groups()
        now = utc_now()
        created_at = min((group.created_at for group in groups), default=now)
        return Session(
            version=SESSION_VERSION,
            source=SessionSource.unknown(),
            groups=groups,
            created_at=created_at,
            imported_at=now,
        )

    def search_by_url(self, needle: str) -> List[Tab]:
        """Tabs whose URL contains ``needle`` (case-insensitive for ASCII)."""
        return self._search("url", needle)

    def search_by_title(self, needle: str) -> List[Tab]:
        """Tabs whose title contains ``needle`` (case-insensitive for ASCII)."""
        return self._search("title", needle)

    def _search(self, column: str, needle: str) -> List[Tab]:
        if column not in ("url", "title"):
            raise ValueError(f"Column '{column}' not searchable")
        rows = self._conn.execute(
            f"""
            SELECT t.id, t.url, t.title, t.favicon_url, t.added_at
            FROM tabs t JOIN tab_groups g ON g.id = t.group_id
            WHERE t.{column} LIKE ? ESCAPE '\\'
            ORDER BY g.created_at DESC, t.group_id, t.position
            """,
            (_like_pattern(needle),),
        ).fetchall()
        return [_row_to_tab(row) for row in rows]

    def get_stats(self) -> StoreStats:
        total_groups, oldest, newest = self._conn.execute(
            "SELECT COUNT(*), MIN(created_at), MAX(created_at) FROM tab_groups"
        ).fetchone()
        total_tabs = self._conn.execute("SELECT COUNT(*) FROM tabs").fetchone()[0]

        domains: Counter[str] = Counter()
        for (url,) in self._conn.execute("SELECT url FROM tabs ORDER BY rowid"):
            host = url_host(url)
            if host:
                domains[host] += 1

        return StoreStats(
            total_groups=total_groups,
            total_tabs=total_tabs,
            oldest_group=ms_to_datetime(oldest) if oldest is not None else None,
            newest_group=ms_to_datetime(newest) if newest is not None else None,
            top_domains=domains.most_common(TOP_DOMAIN_LIMIT),
        )
