"""
Browser extractors organized by browser family.

Structure:
    browser/
    └── chromium/    # Chrome, Edge, Brave, Comet

Usage:
    from extractors.browser.chromium.tab_groups import extract_from_leveldb
"""

from . import chromium

__all__ = ['chromium']
