"""
Exceptions for extractor modules.
"""


class ExtractorError(Exception):
    """Base exception for extractor errors."""
    pass


class UnsupportedPlatform(ExtractorError):
    """Raised when the OS or its browser data directory cannot be determined."""
    pass


class StoreUnavailable(ExtractorError):
    """Raised when a LevelDB store cannot be opened, directly or via a copy."""
    pass


class StoreLocked(ExtractorError):
    """
    Raised internally when another process holds the store lock.

    Handled by copying the store to a scratch directory; never surfaced.
    """
    pass


class MalformedRecord(ExtractorError):
    """A single key/value or line failed schema or URL parsing."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed record {key!r}: {reason}")
