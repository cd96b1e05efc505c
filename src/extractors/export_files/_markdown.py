"""
Markdown export dialect.

    ---
    ## 2 tabs
    > Created 3/20/2025, 10:08:46 PM
    > Rust research

    [The Rust Book](https://doc.rust-lang.org/book/)
    [Crates](https://crates.io/)

``---`` separates groups. The ``##`` heading is a tab count, never a label.
The first ``>`` line after it is the creation annotation; the second, when
present, is the user label.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.logging import get_logger
from core.models import Tab, TabGroup
from core.urls import try_parse_url

LOGGER = get_logger("extractors.export_files.markdown")

GROUP_ID_PREFIX = "markdown-import-"
GROUP_SEPARATOR = "---"

# Greedy so titles containing "](" keep everything up to the last one
TAB_LINE_RE = re.compile(r"^\[(.*)\]\((.*)\)$")


@dataclass
class _GroupHeader:
    heading: Optional[str] = None
    created_note: Optional[str] = None
    label: Optional[str] = None
    tabs: List[Tab] = field(default_factory=list)

    def add_quote(self, text: str) -> None:
        if self.created_note is None:
            self.created_note = text
        elif self.label is None:
            self.label = text or None


def parse_markdown_text(text: str, parsed_at: datetime) -> List[TabGroup]:
    """
    Parse markdown export text into groups.

    The ``> Created ...`` annotation is kept only for logging; group and tab
    timestamps are ``parsed_at``.
    """
    groups: List[TabGroup] = []
    header = _GroupHeader()
    skipped = 0

    def close_group() -> None:
        nonlocal header
        if header.tabs:
            LOGGER.debug(
                "Group %d: heading=%r created=%r label=%r",
                len(groups), header.heading, header.created_note, header.label,
            )
            groups.append(
                TabGroup(
                    id=f"{GROUP_ID_PREFIX}{len(groups)}",
                    created_at=parsed_at,
                    tabs=header.tabs,
                    label=header.label,
                )
            )
        header = _GroupHeader()

    for line_no, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped == GROUP_SEPARATOR:
            close_group()
            continue
        if stripped.startswith("##"):
            # a heading without a separator still starts a new group
            close_group()
            header.heading = stripped.lstrip("#").strip()
            continue
        if stripped.startswith(">"):
            # quote lines only count after a heading
            if header.heading is not None:
                header.add_quote(stripped[1:].strip())
            continue

        match = TAB_LINE_RE.match(stripped)
        if not match:
            continue
        url = try_parse_url(match.group(2))
        if url is None:
            skipped += 1
            LOGGER.warning("Skipping line %d: unparseable URL %r", line_no, match.group(2))
            continue
        header.tabs.append(
            Tab(
                id=f"tab-{len(groups)}-{len(header.tabs)}",
                url=url,
                title=match.group(1),
                added_at=parsed_at,
            )
        )

    close_group()
    LOGGER.info("Parsed %d group(s) from markdown export (%d line(s) skipped)", len(groups), skipped)
    return groups
