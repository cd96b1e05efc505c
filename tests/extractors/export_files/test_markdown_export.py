"""
Tests for the markdown export dialect.
"""

from core.timestamps import utc_now
from extractors.export_files import parse_markdown_text

LABELED = """---
## 2 tabs
> Created 3/20/2025, 10:08:46 PM
> Rust research

[The Rust Book](https://doc.rust-lang.org/book/)
[Crates](https://crates.io/)
"""

UNLABELED = """---
## 2 tabs
> Created 3/20/2025, 10:08:46 PM

[A](https://a.com)
[B](https://b.com)
"""


class TestParseMarkdownText:

    def test_second_quote_line_is_label(self):
        groups = parse_markdown_text(LABELED, utc_now())

        assert len(groups) == 1
        assert groups[0].label == "Rust research"
        assert [tab.title for tab in groups[0].tabs] == ["The Rust Book", "Crates"]

    def test_heading_is_never_label(self):
        groups = parse_markdown_text(UNLABELED, utc_now())

        assert groups[0].label is None
        assert groups[0].tab_count == 2

    def test_created_annotation_not_used_as_timestamp(self):
        parsed_at = utc_now()
        groups = parse_markdown_text(LABELED, parsed_at)

        assert groups[0].created_at == parsed_at
        assert all(tab.added_at == parsed_at for tab in groups[0].tabs)

    def test_separators_split_groups(self):
        groups = parse_markdown_text(LABELED + UNLABELED, utc_now())

        assert [group.id for group in groups] == ["markdown-import-0", "markdown-import-1"]
        assert [group.label for group in groups] == ["Rust research", None]
        assert [tab.id for tab in groups[1].tabs] == ["tab-1-0", "tab-1-1"]

    def test_heading_without_separator_starts_group(self):
        text = "## 1 tabs\n[A](https://a.com)\n## 1 tabs\n[B](https://b.com)\n"
        groups = parse_markdown_text(text, utc_now())
        assert [group.tab_count for group in groups] == [1, 1]

    def test_title_with_brackets(self):
        text = "---\n## 1 tabs\n\n[[PDF] Paper (v2)](https://arxiv.org/abs/1)\n"
        groups = parse_markdown_text(text, utc_now())

        tab = groups[0].tabs[0]
        assert tab.title == "[PDF] Paper (v2)"
        assert tab.url == "https://arxiv.org/abs/1"

    def test_invalid_url_and_prose_skipped(self):
        text = "---\n## 2 tabs\n\nSome prose\n[Bad](nope)\n[Good](https://good.com)\n"
        groups = parse_markdown_text(text, utc_now())

        assert [tab.title for tab in groups[0].tabs] == ["Good"]

    def test_group_without_tabs_dropped(self):
        text = "---\n## 0 tabs\n> Created 3/20/2025, 10:08:46 PM\n---\n## 1 tabs\n\n[A](https://a.com)\n"
        groups = parse_markdown_text(text, utc_now())

        assert len(groups) == 1
        assert groups[0].id == "markdown-import-0"

    def test_quotes_before_heading_ignored(self):
        """Only quote lines that follow a heading become the annotation or label."""
        text = "---\n> Created 3/20/2025, 10:08:46 PM\n> not a label\n[A](https://a.com)\n"
        groups = parse_markdown_text(text, utc_now())

        assert groups[0].label is None
        assert groups[0].tabs[0].title == "A"
