"""
Tests for logging configuration.
"""

import logging
import logging.handlers

from core.config import load_app_config
from core.logging import (
    LOG_FILE_NAME,
    ROOT_LOGGER_NAME,
    configure_logging,
    configure_logging_from_config,
    get_logger,
)


def test_configure_logging_writes_file(tmp_path):
    logger = configure_logging(tmp_path / "logs", level=logging.DEBUG)
    try:
        get_logger("core.test").info("hello from test")
        for handler in logger.handlers:
            handler.flush()

        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "hello from test" in content
        assert "tabsalvage.core.test" in content
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()


def test_reconfigure_replaces_handlers(tmp_path):
    configure_logging(tmp_path / "a")
    logger = configure_logging(tmp_path / "b")
    try:
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()


def test_get_logger_namespace():
    assert get_logger().name == ROOT_LOGGER_NAME
    assert get_logger("extractors.leveldb").name == "tabsalvage.extractors.leveldb"


def test_configure_from_app_config(tmp_path):
    """Level and rotation sizes come from the logging section of config.yml."""
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.yml").write_text(
        "logging:\n  level: warning\n  log_max_mb: 2\n  log_backup_count: 3\n",
        encoding="utf-8",
    )
    config = load_app_config(tmp_path, environ={})

    logger = configure_logging_from_config(config)
    try:
        assert logger.level == logging.WARNING
        file_handler = next(h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler))
        assert file_handler.maxBytes == 2 * 1024 * 1024
        assert file_handler.backupCount == 3
        assert (tmp_path / "logs" / LOG_FILE_NAME).exists()
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
