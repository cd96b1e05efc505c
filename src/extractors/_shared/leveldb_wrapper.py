"""
LevelDB Wrapper for extension stores

Provides a uniform interface over Chromium LevelDB directories such as
``Local Extension Settings/<extension id>``. Wraps ccl_chromium_reader's raw
reader for robust error handling and consistent iteration.

Features:
- Raw record iteration (every physical record, including history)
- Live key/value view (latest sequence number per key, deletions applied)
- Lock-safe opening: a store held open by a running browser is copied to a
  scratch directory and read from there

Usage:
    with open_store_safe(store_path) as handle:
        for record in handle.wrapper.iterate_entries():
            print(record.key_str, record.value_str)

Dependencies:
    - ccl_chromium_reader
"""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from core.logging import get_logger

from ..exceptions import StoreLocked, StoreUnavailable

LOGGER = get_logger("extractors.leveldb")

# API changed in v0.3.x - ccl_leveldb moved inside submodules
CCL_AVAILABLE = False
ccl_leveldb = None

try:
    try:
        from ccl_chromium_reader import ccl_leveldb
    except ImportError:
        from ccl_chromium_reader.ccl_chromium_localstorage import ccl_leveldb

    CCL_AVAILABLE = True
except ImportError:
    LOGGER.warning("ccl_chromium_reader not installed - LevelDB parsing unavailable")

LOCK_FILE_NAME = "LOCK"
MAX_LOGGED_ERRORS = 10

Opener = Callable[[Path], Any]


@dataclass
class LevelDBRecord:
    """Raw LevelDB record with metadata."""
    key: bytes
    value: bytes
    seq_number: int
    is_deleted: bool = False

    @property
    def key_str(self) -> str:
        """Decode key as UTF-8 with error replacement."""
        return self.key.decode('utf-8', errors='replace')

    @property
    def value_str(self) -> str:
        """Decode value as UTF-8 with error replacement."""
        return self.value.decode('utf-8', errors='replace')


def _default_opener(path: Path):
    if not CCL_AVAILABLE:
        raise StoreUnavailable(
            "ccl_chromium_reader not installed. Install with: pip install ccl-chromium-reader"
        )
    return ccl_leveldb.RawLevelDb(str(path))


def _is_deleted(record: Any) -> bool:
    state = getattr(record, 'state', None)
    return state is not None and getattr(state, 'name', None) == "Deleted"


class LevelDBWrapper:
    """
    Wrapper for a single LevelDB directory.

    The database is opened lazily on first iteration unless ``open()`` is
    called explicitly. Corrupt tails are handled with logging and partial
    recovery rather than exceptions.
    """

    def __init__(
        self,
        db_path: Path,
        include_deleted: bool = True,
        opener: Optional[Opener] = None,
    ):
        """
        Initialize LevelDB wrapper.

        Args:
            db_path: Path to LevelDB directory (contains MANIFEST-*, *.ldb, etc.)
            include_deleted: Whether raw iteration yields deletion markers
            opener: Callable returning a raw database for a path
                (defaults to ``ccl_leveldb.RawLevelDb``)
        """
        self.db_path = Path(db_path)
        self.include_deleted = include_deleted
        self._opener = opener or _default_opener
        self._db = None
        self._error_count = 0

    def open(self):
        """Open the database if not already open, propagating open errors."""
        if self._db is None:
            self._db = self._opener(self.db_path)
        return self._db

    def close(self):
        """Close database connection."""
        if self._db is not None:
            try:
                self._db.close()
            except Exception as e:
                LOGGER.debug("Error closing LevelDB at %s: %s", self.db_path, e)
            self._db = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def error_count(self) -> int:
        return self._error_count

    def _note_error(self, message: str, error: Exception) -> None:
        self._error_count += 1
        if self._error_count <= MAX_LOGGED_ERRORS:
            LOGGER.warning(message, error)
        elif self._error_count == MAX_LOGGED_ERRORS + 1:
            LOGGER.warning("Suppressing further LevelDB read errors...")

    def iterate_records_raw(self) -> Iterator[LevelDBRecord]:
        """
        Iterate over all raw LevelDB records.

        The same key may appear several times (older versions, deletion
        markers). Handles invalid KeyState values (e.g. in truncated WAL
        files) by stopping iteration gracefully rather than crashing.

        Yields:
            LevelDBRecord with raw key, value, sequence number
        """
        yield from self._iterate(self.include_deleted)

    def _iterate(self, include_deleted: bool) -> Iterator[LevelDBRecord]:
        db = self.open()
        iterator = db.iterate_records_raw()

        while True:
            # After a ValueError from an invalid KeyState the generator is
            # exhausted, so stop rather than retry.
            try:
                record = next(iterator)
            except StopIteration:
                break
            except ValueError as e:
                self._error_count += 1
                LOGGER.debug(
                    "Stopping raw LevelDB iteration, invalid record state "
                    "(remaining WAL records may be lost): %s",
                    e,
                )
                break
            except Exception as e:
                self._note_error("Error iterating LevelDB records: %s", e)
                break

            try:
                is_deleted = _is_deleted(record)
                if is_deleted and not include_deleted:
                    continue

                yield LevelDBRecord(
                    key=bytes(record.user_key),
                    value=bytes(record.value or b""),
                    seq_number=int(record.seq),
                    is_deleted=is_deleted,
                )
            except (AttributeError, TypeError, ValueError) as e:
                self._note_error("Error reading LevelDB record: %s", e)

    def iterate_entries(self) -> Iterator[LevelDBRecord]:
        """
        Iterate over the live key/value view of the store.

        Each live key is yielded exactly once with the value of its highest
        sequence number; keys whose latest record is a deletion are omitted.
        Keys come out in order of first appearance in the raw log.
        """
        latest: Dict[bytes, LevelDBRecord] = {}
        for record in self._iterate(include_deleted=True):
            current = latest.get(record.key)
            if current is None or record.seq_number >= current.seq_number:
                latest[record.key] = record

        for record in latest.values():
            if not record.is_deleted:
                yield record

    def get_stats(self) -> Dict[str, Any]:
        """Get parsing statistics."""
        return {
            "db_path": str(self.db_path),
            "error_count": self._error_count,
            "ccl_available": CCL_AVAILABLE,
        }


class SafeStoreHandle:
    """
    An open store plus the scratch copy it may have been read from.

    Closing the handle closes the store and deletes the scratch copy.
    """

    def __init__(self, wrapper: LevelDBWrapper, scratch: Optional[tempfile.TemporaryDirectory] = None):
        self.wrapper = wrapper
        self._scratch = scratch

    @property
    def copied(self) -> bool:
        return self._scratch is not None

    @property
    def path(self) -> Path:
        return self.wrapper.db_path

    def close(self) -> None:
        try:
            self.wrapper.close()
        finally:
            if self._scratch is not None:
                self._scratch.cleanup()
                self._scratch = None

    def __enter__(self) -> "SafeStoreHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _is_lock_error(error: BaseException) -> bool:
    if isinstance(error, PermissionError):
        return True
    return "lock" in str(error).lower()


def _open_direct(path: Path, opener: Optional[Opener]) -> LevelDBWrapper:
    wrapper = LevelDBWrapper(path, opener=opener)
    try:
        wrapper.open()
    except StoreUnavailable:
        raise
    except Exception as e:
        if _is_lock_error(e):
            raise StoreLocked(f"LevelDB at {path} is locked: {e}") from e
        raise StoreUnavailable(f"Failed to open LevelDB at {path}: {e}") from e
    return wrapper


def open_store_safe(path: Path, opener: Optional[Opener] = None) -> SafeStoreHandle:
    """
    Open a LevelDB store, falling back to a scratch copy on lock contention.

    Args:
        path: LevelDB directory
        opener: Raw database factory (defaults to ccl_leveldb.RawLevelDb)

    Returns:
        SafeStoreHandle; use it as a context manager

    Raises:
        StoreUnavailable: the store cannot be opened directly for a reason
            other than a lock, or the copy or its reopen fails
    """
    path = Path(path)
    try:
        return SafeStoreHandle(_open_direct(path, opener))
    except StoreLocked as e:
        LOGGER.warning("%s; reading from a temporary copy instead", e)

    scratch = tempfile.TemporaryDirectory(prefix="tabsalvage-store-")
    try:
        copy_path = Path(scratch.name) / path.name
        shutil.copytree(path, copy_path, ignore=shutil.ignore_patterns(LOCK_FILE_NAME))
        LOGGER.debug("Copied locked store %s to %s", path, copy_path)
        wrapper = LevelDBWrapper(copy_path, opener=opener)
        wrapper.open()
    except Exception as e:
        scratch.cleanup()
        raise StoreUnavailable(f"Failed to open copy of locked store {path}: {e}") from e

    return SafeStoreHandle(wrapper, scratch)


def check_leveldb_directory(path: Path) -> bool:
    """
    Check if a path looks like a valid LevelDB directory.

    Args:
        path: Directory path to check

    Returns:
        True if directory contains LevelDB files
    """
    if not path.is_dir():
        return False

    has_current = (path / "CURRENT").exists()
    has_manifest = any(path.glob("MANIFEST-*"))
    has_ldb = any(path.glob("*.ldb")) or any(path.glob("*.log"))

    return has_current or has_manifest or has_ldb
