"""
Shared utilities for extractors.

- leveldb_wrapper: LevelDB iteration and lock-safe store opening

Design Principle:
    Extractors are self-contained modules; shared helpers live here rather
    than in src/core/.
"""

from .leveldb_wrapper import (
    CCL_AVAILABLE,
    LevelDBRecord,
    LevelDBWrapper,
    SafeStoreHandle,
    check_leveldb_directory,
    open_store_safe,
)
