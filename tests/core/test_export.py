"""
Tests for markdown/JSON export rendering.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from core.export import filter_groups_by_label, render_json, render_markdown, write_export
from extractors.export_files import parse_export_text

from tests.fixtures.sessions import make_group, make_tab

CREATED = datetime(2025, 3, 20, 22, 8, 46, tzinfo=timezone.utc)


@pytest.fixture
def groups():
    return [
        make_group("g1", [
            make_tab("t1", "https://doc.rust-lang.org/book/", "The Rust Book"),
            make_tab("t2", "https://crates.io/", "Crates"),
        ], label="Rust research", created_at=CREATED),
        make_group("g2", [make_tab("t3", "https://news.ycombinator.com/", "HN")], created_at=CREATED),
    ]


class TestRenderMarkdown:

    def test_exact_layout(self, groups):
        assert render_markdown(groups) == (
            "---\n"
            "## 2 tabs\n"
            "> Created 3/20/2025, 10:08:46 PM\n"
            "> Rust research\n"
            "\n"
            "[The Rust Book](https://doc.rust-lang.org/book/)\n"
            "[Crates](https://crates.io/)\n"
            "\n"
            "---\n"
            "## 1 tabs\n"
            "> Created 3/20/2025, 10:08:46 PM\n"
            "\n"
            "[HN](https://news.ycombinator.com/)\n"
            "\n"
        )

    def test_empty(self):
        assert render_markdown([]) == ""

    def test_parses_back(self, groups):
        session = parse_export_text(render_markdown(groups), Path("export.md"))

        assert [g.label for g in session.groups] == ["Rust research", None]
        assert [[t.url for t in g.tabs] for g in session.groups] == [
            [t.url for t in g.tabs] for g in groups
        ]


class TestOtherExports:

    def test_render_json(self, groups):
        data = json.loads(render_json(groups))
        assert [g["id"] for g in data] == ["g1", "g2"]
        assert data[0]["tabs"][1]["title"] == "Crates"

    def test_filter_by_label(self, groups):
        assert [g.id for g in filter_groups_by_label(groups, "RUST")] == ["g1"]
        assert filter_groups_by_label(groups, "missing") == []

    def test_write_export(self, tmp_path, groups):
        path = write_export(groups, tmp_path / "out.md")
        assert path.read_text(encoding="utf-8").startswith("---\n## 2 tabs\n")

    def test_write_export_unknown_format(self, tmp_path, groups):
        with pytest.raises(ValueError):
            write_export(groups, tmp_path / "out.xml", fmt="xml")
