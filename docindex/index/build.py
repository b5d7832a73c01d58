"""In-memory symbol index built from one or more shard tables.

``build`` flattens shards into a mapping keyed by ``(key, scope, target_url)``.
Identical tuples collapse to one entry; tuples differing only in target URL
are kept apart as overloads. The resulting index never mutates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import replace

from .matching import fold, rank_label_index
from .types import BuildReport, Entry, EntryKind, MalformedRecord, ShardTable

logger = logging.getLogger(__name__)

SCOPE_SEPARATOR = "::"

EntryIdentity = tuple[str, tuple[str, ...], str]


def parse_scope(label: object) -> tuple[str, ...]:
    """Split a scope label on ``::`` into an outermost-first tuple."""
    if not isinstance(label, str):
        return ()
    return tuple(part for part in label.split(SCOPE_SEPARATOR) if part)


def normalize_scope(scope: object) -> tuple[str, ...] | None:
    """Coerce a caller-supplied scope to tuple form, ``None`` when unusable."""
    if isinstance(scope, str):
        return parse_scope(scope)
    if isinstance(scope, (tuple, list)):
        if all(isinstance(part, str) for part in scope):
            return tuple(scope)
    return None


def _merge_kind(existing: Entry, incoming: Entry) -> Entry:
    if existing.kind is EntryKind.OTHER and incoming.kind is not EntryKind.OTHER:
        return replace(existing, kind=incoming.kind)
    return existing


def _merge_entry(merged: dict[EntryIdentity, Entry], entry: Entry) -> bool:
    """Add a valid entry to ``merged``; return ``True`` when it collapsed."""
    identity = entry.identity
    existing = merged.get(identity)
    if existing is None:
        merged[identity] = entry
        return False
    merged[identity] = _merge_kind(existing, entry)
    return True


def _normalize_kinds(kinds: Iterable[EntryKind] | None) -> frozenset[EntryKind] | None:
    if kinds is None:
        return None
    if isinstance(kinds, EntryKind):
        return frozenset((kinds,))
    return frozenset(kind for kind in kinds if isinstance(kind, EntryKind))


class SymbolIndex:
    """Read-only, de-duplicated collection of documentation entries.

    Entries that cannot be indexed are dropped and repeated identities
    collapse to their first occurrence, the same way ``build`` merges shards.
    """

    __slots__ = ("_entries", "_by_identity", "_keys_folded", "_displays_folded", "_display_lengths", "_kinds")

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        merged: dict[EntryIdentity, Entry] = {}
        for entry in entries:
            if isinstance(entry, Entry) and entry.is_valid():
                _merge_entry(merged, entry)
        self._entries: tuple[Entry, ...] = tuple(merged.values())
        self._by_identity: dict[EntryIdentity, Entry] = dict(merged)
        self._keys_folded = tuple(fold(entry.key) for entry in self._entries)
        self._displays_folded = tuple(fold(entry.display_name) for entry in self._entries)
        self._display_lengths = tuple(len(entry.display_name) for entry in self._entries)
        self._kinds = tuple(entry.kind for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, Entry) or not entry.is_valid():
            return False
        return self._by_identity.get(entry.identity) == entry

    def __repr__(self) -> str:
        return f"SymbolIndex(entries={len(self._entries)})"

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    def query(
        self,
        text: str,
        limit: int | None = None,
        kinds: Iterable[EntryKind] | None = None,
    ) -> tuple[Entry, ...]:
        """Return entries whose key or display name contains ``text``.

        Matching is case-insensitive. An empty query returns no entries.
        ``limit`` keeps only the best-ranked results; ``kinds`` restricts
        results to the given entry kinds.
        """
        if not isinstance(text, str) or not text:
            return ()
        allowed = _normalize_kinds(kinds)
        accept = None if allowed is None else (lambda idx: self._kinds[idx] in allowed)
        positions = rank_label_index(
            text,
            self._keys_folded,
            self._displays_folded,
            self._display_lengths,
            limit=limit,
            accept=accept,
        )
        return tuple(self._entries[idx] for idx in positions)

    def get(self, key: object, scope: object, target_url: object) -> Entry | None:
        """Exact lookup by identity tuple; ``None`` means not found."""
        if not isinstance(key, str) or not isinstance(target_url, str):
            return None
        normalized = normalize_scope(scope)
        if normalized is None:
            return None
        return self._by_identity.get((key, normalized, target_url))


def _duplicate_shard_names(shards: Sequence[ShardTable]) -> tuple[str, ...]:
    # Compared by equality: malformed entries may hold unhashable fields.
    contents_by_name: dict[str, list[tuple[Entry, ...]]] = {}
    for shard in shards:
        contents = contents_by_name.setdefault(shard.name, [])
        entries = tuple(shard.entries)
        if entries not in contents:
            contents.append(entries)
    return tuple(sorted(name for name, contents in contents_by_name.items() if len(contents) > 1))


def build(shards: Iterable[ShardTable]) -> tuple[SymbolIndex, BuildReport]:
    """Merge shard tables into one index and report what was dropped."""
    shard_list = list(shards)
    merged: dict[EntryIdentity, Entry] = {}
    malformed: list[MalformedRecord] = []
    seen = 0
    collapsed = 0

    for shard in shard_list:
        malformed.extend(shard.skipped)
        for position, entry in enumerate(shard.entries):
            seen += 1
            problem = entry.problem() if isinstance(entry, Entry) else "record is not an Entry"
            if problem is not None:
                malformed.append(MalformedRecord(shard.name, position, problem))
                continue
            if _merge_entry(merged, entry):
                collapsed += 1

    duplicate_names = _duplicate_shard_names(shard_list)
    report = BuildReport(
        shard_count=len(shard_list),
        entries_seen=seen,
        entries_kept=len(merged),
        duplicates_collapsed=collapsed,
        malformed=tuple(malformed),
        duplicate_shard_names=duplicate_names,
    )
    if malformed:
        logger.warning("skipped %d malformed search records", len(malformed))
    if duplicate_names:
        logger.debug("merged differing snapshots of shards: %s", ", ".join(duplicate_names))
    logger.debug(
        "built symbol index: %d shards, %d entries kept of %d seen",
        report.shard_count,
        report.entries_kept,
        report.entries_seen,
    )
    return SymbolIndex(merged.values()), report


__all__ = [
    "SCOPE_SEPARATOR",
    "SymbolIndex",
    "build",
    "normalize_scope",
    "parse_scope",
]
