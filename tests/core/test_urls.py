"""
Tests for absolute URL validation and canonical form.
"""

import pytest

from core.urls import InvalidUrl, parse_url, try_parse_url, url_host


class TestParseUrl:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("https://example.com", "https://example.com/"),
            ("HTTPS://Example.COM/Path", "https://example.com/Path"),
            ("http://example.com:80/a", "http://example.com/a"),
            ("https://example.com:8443/a", "https://example.com:8443/a"),
            ("  https://x.com  ", "https://x.com/"),
            ("https://x.com/a b", "https://x.com/a%20b"),
            ("https://x.com/?q=1#frag", "https://x.com/?q=1#frag"),
            ("chrome-extension://abc/page.html", "chrome-extension://abc/page.html"),
            ("about:blank", "about:blank"),
            ("file:///tmp/notes.txt", "file:///tmp/notes.txt"),
        ],
    )
    def test_canonical_form(self, raw, expected):
        assert parse_url(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "not a url",
            "example.com/path",
            "https://",
            "http:///path-only",
            "https://example.com:99999/",
            "https://exa mple.com/",
            "1http://bad-scheme.com",
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(InvalidUrl):
            parse_url(raw)

    def test_invalid_url_is_value_error(self):
        with pytest.raises(ValueError):
            parse_url("nope")

    def test_canonical_form_is_stable(self):
        once = parse_url("HTTP://Example.com:80")
        assert parse_url(once) == once


class TestHelpers:

    def test_try_parse_url(self):
        assert try_parse_url("https://a.com") == "https://a.com/"
        assert try_parse_url("garbage") is None

    def test_url_host(self):
        assert url_host("https://Docs.Example.com/x") == "docs.example.com"
        assert url_host("about:blank") is None
