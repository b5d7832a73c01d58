"""Domain datatypes for documentation search entries and shard tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    TYPE = "type"
    FUNCTION = "function"
    VARIABLE = "variable"
    FILE = "file"
    CONCEPT = "concept"
    OTHER = "other"


@dataclass(frozen=True)
class Entry:
    """One resolvable (symbol name, documentation link) pair."""

    key: str
    display_name: str
    target_url: str
    scope: tuple[str, ...] = ()
    kind: EntryKind = EntryKind.OTHER

    @property
    def identity(self) -> tuple[str, tuple[str, ...], str]:
        return (self.key, self.scope, self.target_url)

    def problem(self) -> str | None:
        """Return why this entry cannot be indexed, or ``None`` when it can."""
        if not isinstance(self.key, str) or not self.key:
            return "missing key"
        if not isinstance(self.target_url, str) or not self.target_url:
            return "missing target_url"
        if not isinstance(self.display_name, str):
            return "display_name is not a string"
        if not isinstance(self.scope, tuple) or not all(isinstance(part, str) for part in self.scope):
            return "scope is not a tuple of strings"
        if not isinstance(self.kind, EntryKind):
            return "kind is not an EntryKind"
        return None

    def is_valid(self) -> bool:
        return self.problem() is None


@dataclass(frozen=True)
class MalformedRecord:
    shard: str
    position: int  # 0-based record index inside the shard, -1 for the whole shard
    reason: str


@dataclass(frozen=True)
class ShardTable:
    """Entries emitted by one generator run, immutable after parsing."""

    name: str
    entries: tuple[Entry, ...] = ()
    source: str | None = None
    skipped: tuple[MalformedRecord, ...] = ()


@dataclass(frozen=True)
class BuildReport:
    """Diagnostic summary returned alongside a built index."""

    shard_count: int = 0
    entries_seen: int = 0
    entries_kept: int = 0
    duplicates_collapsed: int = 0
    malformed: tuple[MalformedRecord, ...] = ()
    duplicate_shard_names: tuple[str, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.malformed)


__all__ = [
    "BuildReport",
    "Entry",
    "EntryKind",
    "MalformedRecord",
    "ShardTable",
]
