"""
OneTab tab-group recovery for Chromium-based browsers

Exports:
- decode_value / DecodedValue / DecodedKind: two-stage store value decoder
- iter_tab_groups: lazy scan of a store's live entries
- extract_session: Session from an open store
- extract_from_leveldb: Session from a store path (lock-safe)
"""
from ._decoder import DecodedKind, DecodedValue, decode_value, parse_group
from .extractor import ScanStats, extract_from_leveldb, extract_session, iter_tab_groups

__all__ = [
    "DecodedKind",
    "DecodedValue",
    "decode_value",
    "parse_group",
    "ScanStats",
    "iter_tab_groups",
    "extract_session",
    "extract_from_leveldb",
]
