"""Shard reading exports: search-table parsing and on-disk discovery."""

from __future__ import annotations

from .load import SEARCH_DIR_NAME, discover_shard_files, load_shard_file, load_shards
from .parse import (
    KIND_BY_FAMILY,
    entries_from_record,
    has_serial_keys,
    infer_kind,
    is_shard_file_name,
    kind_for_shard,
    parse_records,
    parse_search_data,
    shard_family,
    strip_key_serial,
)

__all__ = [
    "KIND_BY_FAMILY",
    "SEARCH_DIR_NAME",
    "discover_shard_files",
    "entries_from_record",
    "has_serial_keys",
    "infer_kind",
    "is_shard_file_name",
    "kind_for_shard",
    "load_shard_file",
    "load_shards",
    "parse_records",
    "parse_search_data",
    "shard_family",
    "strip_key_serial",
]
