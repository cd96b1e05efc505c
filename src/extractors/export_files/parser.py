"""
Export file entry points: format detection and Session construction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from core.enums import ExportFormat
from core.logging import get_logger
from core.models import SESSION_VERSION, Session, SessionSource
from core.timestamps import utc_now

from ._markdown import parse_markdown_text
from ._pipe import parse_pipe_text

LOGGER = get_logger("extractors.export_files")


def detect_format(text: str) -> ExportFormat:
    """Markdown when the text has a ``---`` separator, a ``##`` heading and the word "tabs"."""
    if "---" in text and "##" in text and "tabs" in text:
        return ExportFormat.MARKDOWN
    return ExportFormat.PIPE


def parse_export_text(text: str, path: Path, export_format: Optional[ExportFormat] = None) -> Session:
    """
    Parse export text into a Session tagged with ``path`` as its source.

    Args:
        text: Export contents
        path: File the text came from (provenance only)
        export_format: Force a dialect instead of detecting it
    """
    fmt = export_format or detect_format(text)
    now = utc_now()
    if fmt is ExportFormat.MARKDOWN:
        groups = parse_markdown_text(text, now)
    else:
        groups = parse_pipe_text(text, now)

    session = Session(
        version=SESSION_VERSION,
        source=SessionSource.from_export_file(path),
        groups=groups,
        created_at=now,
        imported_at=now,
    )
    LOGGER.info(
        "Parsed %s export %s: %d group(s), %d tab(s)",
        fmt.value, path, len(groups), session.total_tab_count(),
    )
    return session


def parse_export_file(path: Path, export_format: Optional[ExportFormat] = None) -> Session:
    """Read ``path`` as UTF-8 and parse it."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return parse_export_text(text, path, export_format)
