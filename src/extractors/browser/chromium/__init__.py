"""
Chromium browser family extractors.

Covers: Chrome, Edge, Brave, Comet.

All of them keep extension state in the same place:
    <profile>/Local Extension Settings/<extension id>/  (LevelDB)

Extractors:
- tab_groups: OneTab saved tab groups
"""

from . import tab_groups

__all__ = ['tab_groups']
