"""
Tab database package.

This module provides:
- open_db / migrate: connection setup and SQL migrations
- TabStore: Session import and queries
"""
from .connection import migrate, open_db
from .store import DB_FILE_NAME, InsertStats, StoreStats, TabStore, TransactionFailure

__all__ = [
    "open_db",
    "migrate",
    "TabStore",
    "InsertStats",
    "StoreStats",
    "TransactionFailure",
    "DB_FILE_NAME",
]
