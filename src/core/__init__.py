"""Core model, storage and pipeline layer for saved tab recovery."""

from .config import AppConfig, load_app_config  # noqa: F401
from .database import TabStore, migrate, open_db  # noqa: F401
# NOTE: pipeline not exported from package to avoid circular import with extractors
# Import directly: from core.pipeline import recover, import_export_file
