"""Viewer start-up helpers: build the index once, then search it."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from . import config
from .index import BuildReport, Entry, EntryKind, SymbolIndex, build
from .shards import load_shards


def open_index(roots: Iterable[Path] | None = None) -> tuple[SymbolIndex, BuildReport]:
    """Load every search table under ``roots`` and build one index.

    Falls back to the configured roots when ``roots`` is ``None``. No roots,
    or roots without search tables, give an empty but queryable index.
    """
    if roots is None:
        roots = config.load_shard_roots()
    return build(load_shards(roots))


def search(
    index: SymbolIndex,
    text: str,
    limit: int | None = None,
    kinds: Iterable[EntryKind] | None = None,
) -> tuple[Entry, ...]:
    """Query ``index`` with the configured result limit unless one is given."""
    if limit is None:
        limit = config.load_result_limit()
    return index.query(text, limit=limit, kinds=kinds)
