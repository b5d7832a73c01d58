"""Public package surface for docindex.

Exports the symbol index, its datatypes, and the start-up helpers.
Most implementation lives in submodules under ``docindex``.
"""

from __future__ import annotations

from .index import BuildReport, Entry, EntryKind, MalformedRecord, ShardTable, SymbolIndex, build
from .session import open_index, search

__all__ = [
    "BuildReport",
    "Entry",
    "EntryKind",
    "MalformedRecord",
    "ShardTable",
    "SymbolIndex",
    "build",
    "open_index",
    "search",
]
