"""
Tiered list filtering.

Options are ranked into three tiers: exact matches, then prefix matches,
then substring matches. Each tier keeps the original option order and an
option appears only in the first tier it qualifies for. The result is a
tuple of original indices, recomputed from scratch for every query.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Option:
    """A list entry: its label and its position in the caller's list."""
    label: str
    index: int


class MatchTier(enum.IntEnum):
    EXACT = 0
    PREFIX = 1
    SUBSTRING = 2


class Dedupe(enum.Enum):
    # Each original index appears once (multi-select).
    INDEX = "index"
    # Only the first option carrying a label is kept (single-select, combo box).
    VALUE = "value"


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


def match_tier(query: str, label: str, case_sensitive: bool = False) -> MatchTier | None:
    """Return the best tier ``label`` qualifies for, or None if it doesn't match."""
    q = _fold(query, case_sensitive)
    text = _fold(label, case_sensitive)
    if text == q:
        return MatchTier.EXACT
    if text.startswith(q):
        return MatchTier.PREFIX
    if q in text:
        return MatchTier.SUBSTRING
    return None


def filter_options(
    labels: Sequence[str],
    query: str,
    case_sensitive: bool = False,
    dedupe: Dedupe = Dedupe.INDEX,
) -> tuple[int, ...]:
    """
    Filter ``labels`` by ``query`` and return matching original indices,
    exact matches first, then prefix matches, then substring matches.

    An empty query returns every index in original order.
    """
    if not query:
        return tuple(range(len(labels)))

    tiers: dict[MatchTier, list[int]] = {tier: [] for tier in MatchTier}
    seen_labels: set[str] = set()
    for index, label in enumerate(labels):
        tier = match_tier(query, label, case_sensitive)
        if tier is None:
            continue
        if dedupe is Dedupe.VALUE:
            if label in seen_labels:
                continue
            seen_labels.add(label)
        tiers[tier].append(index)

    return tuple(tiers[MatchTier.EXACT] + tiers[MatchTier.PREFIX] + tiers[MatchTier.SUBSTRING])


def filter_items(
    items: Sequence[T],
    query: str,
    get_text: Callable[[T], str],
    case_sensitive: bool = False,
    dedupe: Dedupe = Dedupe.INDEX,
) -> list[T]:
    """Same ranking as filter_options, returning the items themselves."""
    labels = [get_text(item) for item in items]
    return [items[i] for i in filter_options(labels, query, case_sensitive, dedupe)]
