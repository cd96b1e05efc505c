"""
Extractors for saved OneTab tab groups.

Folder Structure:
- browser/         Browser family extractors (chromium/tab_groups)
- export_files/    OneTab text export parsers (pipe, markdown)
- _shared/         Shared utilities (LevelDB wrapper, lock-safe store opening)
"""

from .exceptions import (
    ExtractorError,
    MalformedRecord,
    StoreLocked,
    StoreUnavailable,
    UnsupportedPlatform,
)
from .browser_patterns import (
    STORE_PATTERNS,
    BaseDirectories,
    StoreLocation,
    detect_all_stores,
    detect_base_directories,
    resolve_store_path,
)

from . import browser
from . import export_files
