"""
Recovery and import pipeline.

Ties the extractors, the dedup engine and the store together:

    recover()            browser store  -> Session
    import_leveldb()     store path     -> Session -> TabStore
    import_export_file() text export    -> Session -> TabStore
    import_native()      canonical JSON -> Session -> TabStore
    dedup_store()        TabStore       -> dedup   -> TabStore
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from extractors._shared.leveldb_wrapper import Opener, check_leveldb_directory
from extractors.browser.chromium.tab_groups import extract_from_leveldb
from extractors.browser_patterns import BaseDirectories, resolve_store_path
from extractors.exceptions import StoreUnavailable
from extractors.export_files import parse_export_file

from .config import AppConfig
from .database import InsertStats, TabStore
from .dedup import DedupResult, DedupStrategy, dedup, strategy_from_name
from .enums import Browser
from .logging import get_logger
from .models import SESSION_VERSION, Session, SessionSource
from .normalize import normalize_session_titles
from .serialization import read_native_session
from .timestamps import utc_now

LOGGER = get_logger("core.pipeline")


@dataclass(slots=True)
class RecoverOptions:
    browser: Browser = Browser.CHROME
    profile: str = "Default"
    dry_run: bool = False
    db_path: Optional[Path] = None  # overrides the resolved LevelDB path

    @classmethod
    def from_config(cls, config: AppConfig, **overrides) -> "RecoverOptions":
        options = cls(browser=Browser(config.recovery.browser), profile=config.recovery.profile)
        for name, value in overrides.items():
            setattr(options, name, value)
        return options


def recover(
    options: RecoverOptions,
    base_dirs: Optional[BaseDirectories] = None,
    opener: Optional[Opener] = None,
) -> Session:
    """
    Recover every OneTab group from one browser profile.

    Raises:
        UnsupportedPlatform: the store path cannot be resolved
        StoreUnavailable: the path is missing, not a directory, or unopenable
    """
    browser = Browser(options.browser)
    source = SessionSource.from_browser(browser, options.profile)

    if options.db_path is not None:
        path = Path(options.db_path)
    else:
        path = resolve_store_path(browser, options.profile, base_dirs=base_dirs)

    if options.dry_run:
        LOGGER.info("Dry run: would read %s store from %s", browser.display_name, path)
        now = utc_now()
        return Session(version=SESSION_VERSION, source=source, groups=[], created_at=now, imported_at=now)

    if not path.exists():
        raise StoreUnavailable(f"OneTab store not found at {path}")
    if not path.is_dir():
        raise StoreUnavailable(f"OneTab store path is not a directory: {path}")
    if not check_leveldb_directory(path):
        LOGGER.warning("%s has no LevelDB files; the store may be empty", path)

    LOGGER.info("Recovering %s (%s) from %s", browser.display_name, options.profile, path)
    return extract_from_leveldb(path, source, opener=opener)


def import_leveldb(
    store: TabStore,
    path: Path,
    browser: Browser = Browser.CHROME,
    profile: str = "Default",
    opener: Optional[Opener] = None,
) -> Tuple[Session, InsertStats]:
    """Extract a LevelDB store at an explicit path and import it."""
    options = RecoverOptions(browser=Browser(browser), profile=profile, db_path=Path(path))
    session = recover(options, opener=opener)
    return session, store.insert_session(session)


def import_export_file(store: TabStore, path: Path) -> Tuple[Session, InsertStats]:
    """Parse a pipe or markdown export and import it."""
    session = parse_export_file(path)
    return session, store.insert_session(session)


def import_native(store: TabStore, path: Path) -> Tuple[Session, InsertStats]:
    """Load a canonical session JSON file and import it."""
    session = read_native_session(path)
    return session, store.insert_session(session)


def dedup_store(
    store: TabStore,
    strategy: DedupStrategy,
    normalize_titles: bool = False,
    dry_run: bool = False,
) -> DedupResult:
    """
    Deduplicate everything in ``store`` and persist the kept tabs per group.

    Groups and tab identifiers are kept; only removed tabs disappear. Under
    ``FuzzyUrl`` the result is a single synthetic group, so only the kept
    tab set is persisted back to each original group.
    """
    session = store.get_session()
    if normalize_titles:
        session = normalize_session_titles(session)
    result = dedup(session, strategy)

    if dry_run:
        LOGGER.info("Dry run: would remove %d tab(s)", len(result.removed))
        return result

    kept_ids = {tab.id for tab in result.session.iter_tabs()}
    for group in session.groups:
        kept = [tab for tab in group.tabs if tab.id in kept_ids]
        if len(kept) != group.tab_count or normalize_titles:
            store.replace_tabs_for_group(group.id, kept)

    LOGGER.info("Persisted dedup result: %d tab(s) removed", len(result.removed))
    return result


def dedup_store_from_config(store: TabStore, config: AppConfig, dry_run: bool = False) -> DedupResult:
    strategy = strategy_from_name(config.dedup.strategy, config.dedup.fuzzy_threshold)
    return dedup_store(store, strategy, normalize_titles=config.dedup.normalize_titles, dry_run=dry_run)
