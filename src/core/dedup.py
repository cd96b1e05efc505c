"""
Duplicate tab removal.

Every strategy is first-seen-wins in session order and returns a new
Session; the input is left untouched. ``FuzzyUrl`` additionally collapses
all kept tabs into one synthetic group (``DEDUPED_GROUP_ID``), unlike the
other strategies which keep group structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from difflib import SequenceMatcher
from typing import Callable, Hashable, List, Union

from .logging import get_logger
from .models import Session, Tab, TabGroup
from .normalize import normalize_title, normalize_url

LOGGER = get_logger("core.dedup")

DEDUPED_GROUP_ID = "deduped"


@dataclass(slots=True, frozen=True)
class ExactUrl:
    name = "exact_url"


@dataclass(slots=True, frozen=True)
class NormalizedUrl:
    name = "normalized_url"


@dataclass(slots=True, frozen=True)
class UrlAndTitle:
    name = "url_and_title"


@dataclass(slots=True, frozen=True)
class FuzzyUrl:
    threshold: float = 0.9
    name = "fuzzy_url"

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")


DedupStrategy = Union[ExactUrl, NormalizedUrl, UrlAndTitle, FuzzyUrl]


@dataclass(slots=True)
class DedupResult:
    original_count: int
    deduplicated_count: int
    removed: List[Tab] = field(default_factory=list)
    session: Session | None = None

    @property
    def removed_count(self) -> int:
        return self.original_count - self.deduplicated_count


def strategy_from_name(name: str, threshold: float = 0.9) -> DedupStrategy:
    """Build a strategy from its config name (``exact_url``, ``fuzzy_url``, ...)."""
    key = name.strip().lower().replace("-", "_")
    if key == ExactUrl.name:
        return ExactUrl()
    if key == NormalizedUrl.name:
        return NormalizedUrl()
    if key == UrlAndTitle.name:
        return UrlAndTitle()
    if key == FuzzyUrl.name:
        return FuzzyUrl(threshold)
    raise ValueError(f"Unknown dedup strategy: {name!r}")


def url_similarity(a: str, b: str) -> float:
    """Similarity of two URLs in [0, 1] (1.0 means identical)."""
    if a == b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def dedup(session: Session, strategy: DedupStrategy) -> DedupResult:
    """
    Remove duplicate tabs from ``session`` under ``strategy``.

    Returns:
        DedupResult with counts, the removed tabs (in encounter order) and
        the new session
    """
    if isinstance(strategy, FuzzyUrl):
        result = _dedup_fuzzy(session, strategy.threshold)
    elif isinstance(strategy, ExactUrl):
        result = _dedup_by_key(session, lambda tab: tab.url)
    elif isinstance(strategy, NormalizedUrl):
        result = _dedup_by_key(session, lambda tab: normalize_url(tab.url))
    elif isinstance(strategy, UrlAndTitle):
        result = _dedup_by_key(session, lambda tab: (normalize_url(tab.url), normalize_title(tab.title)))
    else:
        raise TypeError(f"Unsupported dedup strategy: {strategy!r}")

    LOGGER.info(
        "Dedup (%s): %d -> %d tabs (%d removed)",
        strategy.name, result.original_count, result.deduplicated_count, len(result.removed),
    )
    return result


def _dedup_by_key(session: Session, key: Callable[[Tab], Hashable]) -> DedupResult:
    seen = set()
    removed: List[Tab] = []
    groups: List[TabGroup] = []

    for group in session.groups:
        kept: List[Tab] = []
        for tab in group.tabs:
            k = key(tab)
            if k in seen:
                removed.append(tab)
                continue
            seen.add(k)
            kept.append(tab)
        groups.append(replace(group, tabs=kept))

    kept_count = sum(len(group.tabs) for group in groups)
    return DedupResult(
        original_count=session.total_tab_count(),
        deduplicated_count=kept_count,
        removed=removed,
        session=replace(session, groups=groups),
    )


def _dedup_fuzzy(session: Session, threshold: float) -> DedupResult:
    kept: List[Tab] = []
    kept_keys: List[str] = []
    removed: List[Tab] = []

    for tab in session.iter_tabs():
        candidate = normalize_url(tab.url)
        if any(url_similarity(candidate, other) >= threshold for other in kept_keys):
            removed.append(tab)
            continue
        kept.append(tab)
        kept_keys.append(candidate)

    collapsed = TabGroup(id=DEDUPED_GROUP_ID, created_at=session.created_at, tabs=kept)
    return DedupResult(
        original_count=session.total_tab_count(),
        deduplicated_count=len(kept),
        removed=removed,
        session=replace(session, groups=[collapsed] if kept else []),
    )
