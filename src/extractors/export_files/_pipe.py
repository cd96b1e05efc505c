"""
Pipe export dialect.

    https://a.com | A
    https://b.com | B

    https://c.com | C

One ``URL | TITLE`` line per tab; blank lines separate groups. Lines without
a separator are tabs only when they parse as a bare URL, otherwise they are
header text.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from core.logging import get_logger
from core.models import Tab, TabGroup
from core.urls import try_parse_url

LOGGER = get_logger("extractors.export_files.pipe")

GROUP_ID_PREFIX = "pipe-import-"

PIPE_LINE_RE = re.compile(r"^(\S+)\s*\|\s*(.*)$")


def parse_pipe_text(text: str, parsed_at: datetime) -> List[TabGroup]:
    """
    Parse pipe export text into groups.

    Args:
        text: Export file contents
        parsed_at: Timestamp given to every group and tab

    Returns:
        Groups with positional ids ``pipe-import-<n>`` / ``tab-<n>-<m>``
    """
    groups: List[TabGroup] = []
    current: List[Tab] = []
    skipped = 0

    def close_group() -> None:
        nonlocal current
        if current:
            groups.append(TabGroup(id=f"{GROUP_ID_PREFIX}{len(groups)}", created_at=parsed_at, tabs=current))
        current = []

    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            close_group()
            continue

        url: Optional[str]
        match = PIPE_LINE_RE.match(stripped)
        if match:
            url = try_parse_url(match.group(1))
            title = match.group(2).strip()
            if url is None:
                skipped += 1
                LOGGER.warning("Skipping line %d: unparseable URL %r", line_no, match.group(1))
                continue
        else:
            url = try_parse_url(stripped)
            title = ""
            if url is None:
                LOGGER.debug("Ignoring header line %d", line_no)
                continue

        current.append(
            Tab(
                id=f"tab-{len(groups)}-{len(current)}",
                url=url,
                title=title,
                added_at=parsed_at,
            )
        )

    close_group()
    LOGGER.info("Parsed %d group(s) from pipe export (%d line(s) skipped)", len(groups), skipped)
    return groups
