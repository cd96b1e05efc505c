"""
Export of stored tab groups.

Markdown output uses the same dialect the OneTab extension writes, so an
exported file can be imported again by ``extractors.export_files``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader

from .logging import get_logger
from .models import TabGroup
from .serialization import group_to_dict
from .timestamps import format_created_annotation

LOGGER = get_logger("core.export")

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
MARKDOWN_TEMPLATE = "onetab_export.md.j2"

_ENV: Optional[Environment] = None


def _environment() -> Environment:
    global _ENV
    if _ENV is None:
        env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,  # markdown, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["created_annotation"] = format_created_annotation
        _ENV = env
    return _ENV


def render_markdown(groups: Iterable[TabGroup]) -> str:
    """
    Render groups in the OneTab markdown export dialect.

    Each group becomes::

        ---
        ## 2 tabs
        > Created 3/20/2025, 10:08:46 PM
        > Optional label

        [Title](https://example.com/)
    """
    template = _environment().get_template(MARKDOWN_TEMPLATE)
    return template.render(groups=list(groups))


def render_json(groups: Iterable[TabGroup]) -> str:
    return json.dumps([group_to_dict(group) for group in groups], indent=2, ensure_ascii=False)


def filter_groups_by_label(groups: Iterable[TabGroup], needle: str) -> List[TabGroup]:
    """Groups whose label contains ``needle`` (case-insensitive); unlabeled groups never match."""
    lowered = needle.lower()
    return [group for group in groups if group.label and lowered in group.label.lower()]


def write_export(groups: Iterable[TabGroup], path: Path, fmt: str = "markdown") -> Path:
    """Render ``groups`` as ``markdown`` or ``json`` and write them to ``path``."""
    groups = list(groups)
    if fmt == "markdown":
        content = render_markdown(groups)
    elif fmt == "json":
        content = render_json(groups) + "\n"
    else:
        raise ValueError(f"Unknown export format: {fmt!r}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    LOGGER.info("Exported %d group(s) as %s to %s", len(groups), fmt, path)
    return path
