"""Discovery and reading of search tables from documentation directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..index.types import MalformedRecord, ShardTable
from .parse import is_shard_file_name, parse_search_data

logger = logging.getLogger(__name__)

SEARCH_DIR_NAME = "search"


def discover_shard_files(root: Path) -> list[Path]:
    """Return search tables below ``root`` in a stable order.

    Only files named like ``classes_3.js`` inside a ``search`` directory are
    picked up; hidden directories are skipped.
    """
    root = root.resolve()
    if root.is_file():
        return [root] if is_shard_file_name(root.name) else []
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted((name for name in dirnames if not name.startswith(".")), key=str.lower)
        base = Path(dirpath)
        if base.name != SEARCH_DIR_NAME:
            continue
        for filename in sorted(filenames, key=str.lower):
            if is_shard_file_name(filename):
                files.append(base / filename)
    return files


def load_shard_file(path: Path) -> ShardTable:
    """Read one search table; unreadable files become empty shards."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("cannot read search table %s: %s", path, exc)
        return ShardTable(
            name=path.name,
            source=str(path),
            skipped=(MalformedRecord(path.name, -1, f"unreadable file: {exc.strerror or exc}"),),
        )
    shard = parse_search_data(text, path.name, source=str(path))
    if shard.skipped:
        logger.debug("%s: skipped %d malformed records", path, len(shard.skipped))
    return shard


def load_shards(roots: Iterable[Path]) -> list[ShardTable]:
    """Load every search table found under the given roots.

    Shards sharing a file name across roots are returned separately; they
    are independent snapshots merged later entry by entry.
    """
    shards: list[ShardTable] = []
    seen_paths: set[Path] = set()
    for root in roots:
        for path in discover_shard_files(Path(root)):
            if path in seen_paths:
                continue
            seen_paths.add(path)
            shards.append(load_shard_file(path))
    return shards


__all__ = [
    "SEARCH_DIR_NAME",
    "discover_shard_files",
    "load_shard_file",
    "load_shards",
]
