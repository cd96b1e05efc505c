"""
Shared Browser Patterns

Per-OS, per-vendor location of the OneTab extension store:

    <base>/<vendor dirs>/<profile>/Local Extension Settings/<extension id>

<base> is the platform data directory:
- Windows: %LOCALAPPDATA%
- macOS:   ~/Library/Application Support
- Linux:   $XDG_CONFIG_HOME, or ~/.config

The base directory is resolved once into a ``BaseDirectories`` value and
passed in, so resolution itself is pure and does not touch the filesystem.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from core.enums import Browser
from core.logging import get_logger

from .exceptions import UnsupportedPlatform

LOGGER = get_logger("extractors.browser_patterns")

WINDOWS = "windows"
MACOS = "macos"
LINUX = "linux"

EXTENSION_SETTINGS_DIR = "Local Extension Settings"
DEFAULT_PROFILES: Tuple[str, ...] = ("Default", "Profile 1")

# Vendor subdirectories below the platform base directory
STORE_PATTERNS: Dict[Browser, Dict[str, Tuple[str, ...]]] = {
    Browser.CHROME: {
        WINDOWS: ("Google", "Chrome", "User Data"),
        MACOS: ("Google", "Chrome"),
        LINUX: ("google-chrome",),
    },
    Browser.EDGE: {
        WINDOWS: ("Microsoft", "Edge", "User Data"),
        MACOS: ("Microsoft Edge",),
        LINUX: ("microsoft-edge",),
    },
    Browser.BRAVE: {
        WINDOWS: ("BraveSoftware", "Brave-Browser", "User Data"),
        MACOS: ("BraveSoftware", "Brave-Browser"),
        LINUX: ("BraveSoftware", "Brave-Browser"),
    },
    Browser.COMET: {
        WINDOWS: ("Perplexity", "Comet", "User Data"),
        MACOS: ("Perplexity", "Comet"),
        LINUX: ("perplexity-comet",),
    },
}

_SYSTEM_ALIASES = {
    "win32": WINDOWS,
    "windows": WINDOWS,
    "cygwin": WINDOWS,
    "darwin": MACOS,
    "macos": MACOS,
    "linux": LINUX,
}


@dataclass(slots=True, frozen=True)
class BaseDirectories:
    """Resolved platform data directory for one OS."""

    system: str
    base: Path


@dataclass(slots=True, frozen=True)
class StoreLocation:
    browser: Browser
    profile: str
    path: Path


def normalize_system(system: Optional[str] = None) -> str:
    """Map ``sys.platform`` style names to windows/macos/linux."""
    raw = sys.platform if system is None else system
    key = (raw or "").lower()
    if key.startswith("linux"):
        key = "linux"
    try:
        return _SYSTEM_ALIASES[key]
    except KeyError:
        raise UnsupportedPlatform(f"Unsupported operating system: {raw!r}") from None


def detect_base_directories(
    system: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> BaseDirectories:
    """
    Locate the platform data directory browsers keep their profiles under.

    Args:
        system: OS name (``sys.platform`` style); defaults to the running OS
        environ: Environment mapping; defaults to ``os.environ``
        home: Home directory; defaults to ``Path.home()``

    Raises:
        UnsupportedPlatform: unknown OS, or the base directory cannot be located
    """
    resolved = normalize_system(system)
    env = os.environ if environ is None else environ

    if resolved == WINDOWS:
        local_app_data = env.get("LOCALAPPDATA")
        if not local_app_data:
            raise UnsupportedPlatform("LOCALAPPDATA is not set; cannot locate browser data")
        return BaseDirectories(system=resolved, base=Path(local_app_data))

    if resolved == LINUX and env.get("XDG_CONFIG_HOME"):
        return BaseDirectories(system=resolved, base=Path(env["XDG_CONFIG_HOME"]))

    if home is None:
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise UnsupportedPlatform(f"Cannot determine home directory: {exc}") from exc

    if resolved == MACOS:
        return BaseDirectories(system=resolved, base=home / "Library" / "Application Support")
    return BaseDirectories(system=resolved, base=home / ".config")


def resolve_store_path(
    browser: Browser | str,
    profile: str,
    *,
    system: Optional[str] = None,
    base_dirs: Optional[BaseDirectories] = None,
) -> Path:
    """
    Return the OneTab store directory for ``browser``/``profile``.

    Existence is not checked.

    Raises:
        UnsupportedPlatform: if the OS or its base directory cannot be determined
    """
    browser = Browser(browser)
    if base_dirs is None:
        base_dirs = detect_base_directories(system)

    vendor_dirs = STORE_PATTERNS[browser].get(base_dirs.system)
    if vendor_dirs is None:
        raise UnsupportedPlatform(
            f"No {browser.display_name} layout known for {base_dirs.system!r}"
        )

    return base_dirs.base.joinpath(
        *vendor_dirs, profile, EXTENSION_SETTINGS_DIR, browser.extension_id
    )


def detect_all_stores(
    profiles: Sequence[str] = DEFAULT_PROFILES,
    *,
    base_dirs: Optional[BaseDirectories] = None,
) -> List[StoreLocation]:
    """List every browser/profile whose OneTab store directory exists."""
    if base_dirs is None:
        base_dirs = detect_base_directories()

    found: List[StoreLocation] = []
    for browser in Browser.all_browsers():
        for profile in profiles:
            path = resolve_store_path(browser, profile, base_dirs=base_dirs)
            if path.is_dir():
                LOGGER.debug("Found %s store for profile %s at %s", browser.display_name, profile, path)
                found.append(StoreLocation(browser=browser, profile=profile, path=path))

    LOGGER.info("Detected %d OneTab store(s)", len(found))
    return found
