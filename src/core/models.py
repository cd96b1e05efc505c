"""
Canonical tab model shared by every extractor, the dedup engine and the store.

All producers (LevelDB decoder, export-file parsers, canonical JSON reader)
build these objects; nothing downstream looks at source-specific formats.
Transformations return new objects and never mutate their input.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .enums import Browser, SourceKind
from .timestamps import UNIX_EPOCH, utc_now
from .urls import url_host

SESSION_VERSION = 1
TOP_DOMAIN_LIMIT = 10


@dataclass(slots=True)
class Tab:
    id: str
    url: str
    title: str
    added_at: datetime
    favicon_url: Optional[str] = None

    @property
    def domain(self) -> Optional[str]:
        """Lowercase host of the tab URL, or ``None`` for host-less URLs."""
        return url_host(self.url)


@dataclass(slots=True)
class TabGroup:
    id: str
    created_at: datetime
    tabs: List[Tab] = field(default_factory=list)
    label: Optional[str] = None
    pinned: bool = False
    locked: bool = False
    starred: bool = False

    @property
    def tab_count(self) -> int:
        return len(self.tabs)


@dataclass(slots=True, frozen=True)
class SessionSource:
    """
    Provenance of a session.

    ``browser`` and ``profile`` are set for the browser kind; ``path`` for the
    export-file and native kinds. Use the ``from_*`` constructors rather than
    filling fields by hand.
    """

    kind: SourceKind
    browser: Optional[Browser] = None
    profile: Optional[str] = None
    path: Optional[Path] = None

    @classmethod
    def from_browser(cls, browser: Browser, profile: str) -> "SessionSource":
        return cls(kind=SourceKind.BROWSER, browser=Browser(browser), profile=profile)

    @classmethod
    def from_export_file(cls, path: Path) -> "SessionSource":
        return cls(kind=SourceKind.EXPORT_FILE, path=Path(path))

    @classmethod
    def from_native(cls, path: Path) -> "SessionSource":
        return cls(kind=SourceKind.NATIVE, path=Path(path))

    @classmethod
    def unknown(cls) -> "SessionSource":
        return cls(kind=SourceKind.UNKNOWN)

    def describe(self) -> str:
        """Short human-readable description used in log lines."""
        if self.kind is SourceKind.BROWSER and self.browser is not None:
            return f"{self.browser.display_name} ({self.profile})"
        if self.path is not None:
            return f"{self.kind.value}:{self.path}"
        return self.kind.value


@dataclass(slots=True)
class SessionStats:
    total_groups: int
    total_tabs: int
    oldest_group: Optional[datetime]
    newest_group: Optional[datetime]
    top_domains: List[Tuple[str, int]]


@dataclass(slots=True)
class Session:
    version: int
    source: SessionSource
    groups: List[TabGroup]
    created_at: datetime
    imported_at: datetime

    def total_tab_count(self) -> int:
        return sum(group.tab_count for group in self.groups)

    def iter_tabs(self) -> Iterable[Tab]:
        for group in self.groups:
            yield from group.tabs

    def stats(self) -> SessionStats:
        """Summary counts plus the busiest domains (ties keep first-seen order)."""
        domains: Counter[str] = Counter()
        for tab in self.iter_tabs():
            host = tab.domain
            if host:
                domains[host] += 1

        created = [group.created_at for group in self.groups]
        return SessionStats(
            total_groups=len(self.groups),
            total_tabs=self.total_tab_count(),
            oldest_group=min(created) if created else None,
            newest_group=max(created) if created else None,
            top_domains=domains.most_common(TOP_DOMAIN_LIMIT),
        )

    @classmethod
    def merge(cls, sessions: Iterable["Session"]) -> "Session":
        """
        Concatenate sessions into one.

        The result carries the highest version, an unknown source and the
        earliest ``created_at``. Merging nothing yields an empty version-0
        session.
        """
        sessions = list(sessions)
        now = utc_now()
        if not sessions:
            return cls(
                version=0,
                source=SessionSource.unknown(),
                groups=[],
                created_at=now,
                imported_at=now,
            )

        groups: List[TabGroup] = []
        for session in sessions:
            groups.extend(session.groups)

        return cls(
            version=max(session.version for session in sessions),
            source=SessionSource.unknown(),
            groups=groups,
            created_at=min((session.created_at for session in sessions), default=UNIX_EPOCH),
            imported_at=now,
        )
