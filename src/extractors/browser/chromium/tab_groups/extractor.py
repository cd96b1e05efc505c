"""
OneTab tab-group recovery from a Chromium extension LevelDB store.

Walks the live key/value view of the store once per call, decodes every
value that carries the ``tabGroups`` marker and yields canonical TabGroups.
Record-level problems are logged and skipped; they never abort the scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Set

from core.logging import get_logger
from core.models import SESSION_VERSION, Session, SessionSource, TabGroup
from core.timestamps import utc_now
from extractors._shared.leveldb_wrapper import LevelDBRecord, Opener, open_store_safe
from extractors.exceptions import MalformedRecord

from ._decoder import decode_value, group_objects, parse_group
from ._schemas import TAB_GROUPS_MARKER

LOGGER = get_logger("extractors.browser.chromium.tab_groups")


class EntrySource(Protocol):
    def iterate_entries(self) -> Iterator[LevelDBRecord]:
        ...


@dataclass(slots=True)
class ScanStats:
    """Counts gathered while scanning one store."""

    entries_seen: int = 0
    entries_decoded: int = 0
    entries_skipped: int = 0
    groups_yielded: int = 0
    groups_skipped: int = 0
    tabs_dropped: int = 0
    duplicate_group_ids: List[str] = field(default_factory=list)


def iter_tab_groups(store: EntrySource, stats: Optional[ScanStats] = None) -> Iterator[TabGroup]:
    """
    Lazily yield every recoverable TabGroup in ``store``.

    Args:
        store: Anything exposing ``iterate_entries()`` (normally a LevelDBWrapper)
        stats: Optional accumulator for skip counts

    Yields:
        TabGroup in store iteration order; a group id already yielded in this
        scan is skipped
    """
    stats = stats if stats is not None else ScanStats()
    seen_ids: Set[str] = set()

    for record in store.iterate_entries():
        stats.entries_seen += 1
        try:
            text = record.value.decode("utf-8")
        except UnicodeDecodeError:
            continue
        if TAB_GROUPS_MARKER not in text:
            continue

        decoded = decode_value(text)
        if not decoded.recognized:
            stats.entries_skipped += 1
            LOGGER.warning("%s", MalformedRecord(record.key_str, "value is not a JSON object"))
            continue

        try:
            raw_groups = group_objects(decoded.payload)
        except MalformedRecord as exc:
            stats.entries_skipped += 1
            LOGGER.warning("%s", exc)
            continue

        stats.entries_decoded += 1
        LOGGER.debug("Decoded %s (%s): %d group(s)", record.key_str, decoded.kind.value, len(raw_groups))

        for raw in raw_groups:
            try:
                group = parse_group(raw)
            except MalformedRecord as exc:
                stats.groups_skipped += 1
                LOGGER.warning("Skipping group in %s: %s", record.key_str, exc)
                continue
            stats.tabs_dropped += len(raw["tabsMeta"]) - (group.tab_count if group else 0)
            if group is None:
                stats.groups_skipped += 1
                continue
            if group.id in seen_ids:
                stats.duplicate_group_ids.append(group.id)
                LOGGER.warning("Skipping duplicate group id %s", group.id)
                continue
            seen_ids.add(group.id)
            stats.groups_yielded += 1
            yield group


def extract_session(store: EntrySource, source: SessionSource) -> Session:
    """Build a version-1 Session from every group in ``store``."""
    stats = ScanStats()
    groups = list(iter_tab_groups(store, stats))
    now = utc_now()
    session = Session(
        version=SESSION_VERSION,
        source=source,
        groups=groups,
        created_at=now,
        imported_at=now,
    )
    LOGGER.info(
        "Recovered %d group(s) / %d tab(s) from %s (%d entries scanned, %d skipped, %d groups skipped, %d tabs dropped, %d duplicate ids)",
        len(groups),
        session.total_tab_count(),
        source.describe(),
        stats.entries_seen,
        stats.entries_skipped,
        stats.groups_skipped,
        stats.tabs_dropped,
        len(stats.duplicate_group_ids),
    )
    return session


def extract_from_leveldb(path: Path, source: SessionSource, opener: Optional[Opener] = None) -> Session:
    """
    Open the store at ``path`` (copying it if locked) and extract a Session.

    Raises:
        StoreUnavailable: the store cannot be opened
    """
    with open_store_safe(path, opener=opener) as handle:
        if handle.copied:
            LOGGER.info("Reading %s from a temporary copy", path)
        return extract_session(handle.wrapper, source)
