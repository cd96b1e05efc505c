"""
Core Enumerations

Centralized enum definitions for consistent typing across the codebase.
Using StrEnum (Python 3.11+) for string-based enums that serialize naturally.
"""

from enum import StrEnum

# OneTab extension identifiers per store
ONETAB_CHROME_WEB_STORE_ID = "chphlpgkkbolifaimnlloiipkdnihall"
ONETAB_EDGE_ADDONS_ID = "hoimpamkkoehapgenciaoajfkfkpgfop"


class Browser(StrEnum):
    """Chromium-based browsers whose OneTab store can be recovered."""

    CHROME = "chrome"
    EDGE = "edge"
    BRAVE = "brave"
    COMET = "comet"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def extension_id(self) -> str:
        """OneTab extension identifier as installed in this browser."""
        if self is Browser.EDGE:
            return ONETAB_EDGE_ADDONS_ID
        return ONETAB_CHROME_WEB_STORE_ID

    @classmethod
    def all_browsers(cls) -> tuple["Browser", ...]:
        """Return all supported browsers."""
        return tuple(cls)


_DISPLAY_NAMES = {
    Browser.CHROME: "Chrome",
    Browser.EDGE: "Edge",
    Browser.BRAVE: "Brave",
    Browser.COMET: "Comet (Perplexity)",
}


class SourceKind(StrEnum):
    """Where a session's data came from."""

    BROWSER = "browser"
    EXPORT_FILE = "export_file"
    NATIVE = "native"
    UNKNOWN = "unknown"


class ExportFormat(StrEnum):
    """Text export dialects written by the OneTab extension."""

    PIPE = "pipe"
    MARKDOWN = "markdown"
