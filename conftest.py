from pathlib import Path

import pytest

from core.database import TabStore


@pytest.fixture()
def tab_store(tmp_path: Path):
    """A migrated, file-backed tab store that is closed after the test."""
    store = TabStore.open(tmp_path / "data" / "tabs.db")
    try:
        yield store
    finally:
        store.close()
