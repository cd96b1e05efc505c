"""
Tests for title and URL normalization.
"""

import pytest

from core.normalize import TITLE_SUFFIXES, normalize_session_titles, normalize_title, normalize_url

from tests.fixtures.sessions import make_group, make_session, make_tab


class TestNormalizeTitle:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("rust lifetimes - Google Search", "rust lifetimes"),
            ("Never Gonna Give You Up - YouTube", "Never Gonna Give You Up"),
            ("  spaced    out\ttitle  ", "spaced out title"),
            ("Rust (programming language) - Wikipedia", "Rust (programming language)"),
            ("repo | GitHub | GitHub", "repo"),
            ("Thread - Reddit - Reddit", "Thread"),
            ("Plain title", "Plain title"),
            ("", ""),
        ],
    )
    def test_examples(self, raw, expected):
        assert normalize_title(raw) == expected

    def test_nfc(self):
        decomposed = "Cafe\u0301"
        assert normalize_title(decomposed) == "Caf\u00e9"

    def test_suffix_alone_is_kept(self):
        """A title consisting only of a suffix has no leading space to match."""
        assert normalize_title(" on X") == "on X"

    @pytest.mark.parametrize(
        "raw",
        [
            "a - Wikipedia  - Reddit",
            "x on X on X",
            "  lots   of   space | Medium ",
            "post – Frontend Masters Blog",
            "- YouTube",
            " weird spaces | DEV Community",
        ] + [f"t{suffix}" for suffix in TITLE_SUFFIXES],
    )
    def test_idempotent(self, raw):
        once = normalize_title(raw)
        assert normalize_title(once) == once


class TestNormalizeUrl:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("https://example.com/post?utm_source=twitter", "https://example.com/post"),
            ("HTTPS://Example.COM/Post/", "https://example.com/Post"),
            ("https://example.com/", "https://example.com/"),
            ("https://example.com/a#section", "https://example.com/a"),
            ("https://x.com/?b=2&a=1&utm_medium=x", "https://x.com/?a=1&b=2"),
            ("https://x.com/?b=2&a=1&b=1", "https://x.com/?a=1&b=2&b=1"),
            ("https://x.com/path//", "https://x.com/path/"),
        ],
    )
    def test_examples(self, raw, expected):
        assert normalize_url(raw) == expected

    def test_unparseable_falls_back_to_lowercase(self):
        assert normalize_url("Not A URL") == "not a url"

    def test_non_utm_params_kept(self):
        assert normalize_url("https://x.com/?ref=home") == "https://x.com/?ref=home"


def test_normalize_session_titles_returns_copy():
    session = make_session([make_group("g", [make_tab("t", "https://a.com/", "Video - YouTube")])])

    normalized = normalize_session_titles(session)

    assert normalized.groups[0].tabs[0].title == "Video"
    assert session.groups[0].tabs[0].title == "Video - YouTube"
