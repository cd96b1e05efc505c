"""Tests for src/core/enums.py - Core enumerations."""

import json

import pytest

from core.enums import (
    ONETAB_CHROME_WEB_STORE_ID,
    ONETAB_EDGE_ADDONS_ID,
    Browser,
    ExportFormat,
    SourceKind,
)


class TestBrowser:
    """Tests for Browser enum."""

    def test_browser_values(self):
        """Verify browser string values match config keys."""
        assert Browser.CHROME == "chrome"
        assert Browser.EDGE == "edge"
        assert Browser.BRAVE == "brave"
        assert Browser.COMET == "comet"

    def test_from_string(self):
        assert Browser("brave") is Browser.BRAVE

    def test_unknown_browser(self):
        with pytest.raises(ValueError):
            Browser("firefox")

    def test_all_browsers_order(self):
        assert Browser.all_browsers() == (Browser.CHROME, Browser.EDGE, Browser.BRAVE, Browser.COMET)

    def test_display_names(self):
        assert Browser.COMET.display_name == "Comet (Perplexity)"
        assert all(browser.display_name for browser in Browser)

    def test_extension_ids(self):
        """Edge installs OneTab from its own add-ons store; the rest use the Chrome Web Store."""
        assert Browser.EDGE.extension_id == ONETAB_EDGE_ADDONS_ID
        for browser in (Browser.CHROME, Browser.BRAVE, Browser.COMET):
            assert browser.extension_id == ONETAB_CHROME_WEB_STORE_ID

    def test_json_serialization(self):
        """StrEnum values serialize as plain strings."""
        assert json.dumps({"browser": Browser.CHROME}) == '{"browser": "chrome"}'


class TestOtherEnums:

    def test_source_kinds(self):
        assert {kind.value for kind in SourceKind} == {"browser", "export_file", "native", "unknown"}

    def test_export_formats(self):
        assert ExportFormat("markdown") is ExportFormat.MARKDOWN
        assert f"{ExportFormat.PIPE}" == "pipe"
