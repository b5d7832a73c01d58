"""Substring matching and ranking over folded entry labels.

Ranking is two-tier: display-name prefix matches first, then any other
substring hit on the key or display name. Within a tier shorter display
names win, and insertion order breaks the remaining ties.
"""

from __future__ import annotations

import heapq
from collections.abc import Callable, Iterator, Sequence

PREFIX_TIER = 0
SUBSTRING_TIER = 1


def fold(text: str) -> str:
    return text.casefold()


def match_tier(query_folded: str, key_folded: str, display_folded: str) -> int | None:
    """Return the ranking tier for one candidate, or ``None`` when it misses."""
    if not query_folded:
        return None
    if display_folded.startswith(query_folded):
        return PREFIX_TIER
    if query_folded in display_folded or query_folded in key_folded:
        return SUBSTRING_TIER
    return None


def rank_label_index(
    query: str,
    keys_folded: Sequence[str],
    displays_folded: Sequence[str],
    display_lengths: Sequence[int],
    limit: int | None = None,
    accept: Callable[[int], bool] | None = None,
) -> list[int]:
    """Return candidate positions ordered by match quality.

    All three sequences are parallel and indexed by insertion position.
    ``limit`` of ``None`` returns every match. ``accept`` filters positions
    before ranking.
    """
    if len(keys_folded) != len(displays_folded) or len(keys_folded) != len(display_lengths):
        raise ValueError("label sequences must have the same length")
    if not isinstance(query, str):
        return []
    query_folded = fold(query)
    if not query_folded:
        return []

    def iter_matches() -> Iterator[tuple[int, int, int]]:
        for idx, key_folded in enumerate(keys_folded):
            if accept is not None and not accept(idx):
                continue
            tier = match_tier(query_folded, key_folded, displays_folded[idx])
            if tier is None:
                continue
            yield (tier, display_lengths[idx], idx)

    if limit is None:
        scored = sorted(iter_matches())
    else:
        scored = heapq.nsmallest(max(0, limit), iter_matches())
    return [idx for _, _, idx in scored]


__all__ = [
    "PREFIX_TIER",
    "SUBSTRING_TIER",
    "fold",
    "match_tier",
    "rank_label_index",
]
