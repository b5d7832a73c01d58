"""Symbol index exports: datatypes, construction, and matching helpers."""

from __future__ import annotations

from .build import SCOPE_SEPARATOR, SymbolIndex, build, normalize_scope, parse_scope
from .matching import fold, match_tier, rank_label_index
from .types import BuildReport, Entry, EntryKind, MalformedRecord, ShardTable

__all__ = [
    "BuildReport",
    "Entry",
    "EntryKind",
    "MalformedRecord",
    "SCOPE_SEPARATOR",
    "ShardTable",
    "SymbolIndex",
    "build",
    "fold",
    "match_tier",
    "normalize_scope",
    "parse_scope",
    "rank_label_index",
]
