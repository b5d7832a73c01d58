"""Parsing of generator-emitted ``searchData`` tables into shard tables.

Each table is a JavaScript array literal assigned to ``searchData``. Records
look like ``['key',['Display',['url',1,'scope'],...]]``; the flat form
``['key',['Display','url','scope']]`` is accepted too. Newer generators append a
serial number to every key (``identity_418``); it is dropped so the same
symbol keeps one identity across tables. Bad records are skipped and
reported, never raised.
"""

from __future__ import annotations

import ast
import html
import re

from ..index.build import parse_scope
from ..index.types import Entry, EntryKind, MalformedRecord, ShardTable

_ASSIGNMENT_PREFIX_RE = re.compile(r"^\s*(?:var|let|const)\s+[A-Za-z_$][\w$]*\s*=\s*")
_SHARD_NAME_RE = re.compile(r"^(?P<family>[a-z]+)_[0-9a-f]+\.js$")
_FILE_PAGE_RE = re.compile(r"_8[a-z0-9_]+\.html$")
_SERIAL_SUFFIX_RE = re.compile(r"_[0-9]+$")

KIND_BY_FAMILY: dict[str, EntryKind] = {
    "classes": EntryKind.TYPE,
    "typedefs": EntryKind.TYPE,
    "enums": EntryKind.TYPE,
    "functions": EntryKind.FUNCTION,
    "related": EntryKind.FUNCTION,
    "variables": EntryKind.VARIABLE,
    "enumvalues": EntryKind.VARIABLE,
    "files": EntryKind.FILE,
    "concepts": EntryKind.CONCEPT,
}

TYPE_PAGE_PREFIXES = ("class", "struct", "union", "interface", "protocol", "exception")


def shard_family(name: str) -> str | None:
    """Return the table family (``all``, ``classes``...) for a shard file name."""
    match = _SHARD_NAME_RE.match(name)
    return match.group("family") if match else None


def is_shard_file_name(name: str) -> bool:
    return shard_family(name) is not None


def infer_kind(target_url: str) -> EntryKind:
    """Guess an entry kind from the documentation page it links to."""
    page = target_url.split("#", 1)[0].rsplit("/", 1)[-1]
    if page.startswith(TYPE_PAGE_PREFIXES):
        return EntryKind.TYPE
    if page.startswith("concept"):
        return EntryKind.CONCEPT
    if "#" not in target_url and _FILE_PAGE_RE.search(page):
        return EntryKind.FILE
    return EntryKind.OTHER


def kind_for_shard(name: str) -> EntryKind | None:
    """Kind implied by the shard family, ``None`` for mixed tables."""
    family = shard_family(name)
    if family is None or family == "all":
        return None
    return KIND_BY_FAMILY.get(family, EntryKind.OTHER)


def strip_key_serial(key: str) -> str:
    return _SERIAL_SUFFIX_RE.sub("", key, count=1)


def has_serial_keys(records: list | tuple) -> bool:
    """True when every usable key in a table ends in a ``_<number>`` serial."""
    keys = [
        record[0]
        for record in records
        if isinstance(record, (list, tuple)) and record and isinstance(record[0], str) and record[0]
    ]
    return bool(keys) and all(_SERIAL_SUFFIX_RE.search(key) for key in keys)


def _strip_assignment(text: str) -> str:
    body = _ASSIGNMENT_PREFIX_RE.sub("", text, count=1).strip()
    if body.endswith(";"):
        body = body[:-1].rstrip()
    return body


def _targets(payload: list | tuple) -> list[tuple[object, object]]:
    """Return ``(url, scope_label)`` pairs for a record payload."""
    rest = payload[1:]
    if not rest:
        return [(None, None)]
    if isinstance(rest[0], str):
        return [(rest[0], rest[1] if len(rest) > 1 else "")]
    targets: list[tuple[object, object]] = []
    for item in rest:
        if not isinstance(item, (list, tuple)) or not item:
            targets.append((None, None))
            continue
        if len(item) >= 3:
            scope_label = item[2]
        elif len(item) == 2 and isinstance(item[1], str):
            scope_label = item[1]
        else:
            scope_label = ""
        targets.append((item[0], scope_label))
    return targets


def entries_from_record(
    record: object,
    shard_name: str,
    position: int,
    kind: EntryKind | None = None,
    strip_serial: bool = False,
) -> tuple[list[Entry], list[MalformedRecord]]:
    """Expand one raw record into entries, one per documentation target."""
    if not isinstance(record, (list, tuple)) or len(record) < 2:
        return [], [MalformedRecord(shard_name, position, "record is not a (key, payload) pair")]
    key, payload = record[0], record[1]
    if strip_serial and isinstance(key, str):
        key = strip_key_serial(key)
    if not isinstance(key, str) or not key:
        return [], [MalformedRecord(shard_name, position, "missing key")]
    if isinstance(payload, str):
        payload = [payload]
    if not isinstance(payload, (list, tuple)) or not payload:
        return [], [MalformedRecord(shard_name, position, "missing target_url")]

    raw_display = payload[0]
    display_name = html.unescape(raw_display) if isinstance(raw_display, str) and raw_display else key

    entries: list[Entry] = []
    skipped: list[MalformedRecord] = []
    for url, scope_label in _targets(payload):
        if not isinstance(url, str) or not url:
            skipped.append(MalformedRecord(shard_name, position, "missing target_url"))
            continue
        entries.append(
            Entry(
                key=key,
                display_name=display_name,
                target_url=url,
                scope=parse_scope(scope_label),
                kind=kind if kind is not None else infer_kind(url),
            )
        )
    return entries, skipped


def parse_records(records: object, name: str, source: str | None = None) -> ShardTable:
    """Build a shard table from already-decoded records."""
    if not isinstance(records, (list, tuple)):
        return ShardTable(
            name=name,
            source=source,
            skipped=(MalformedRecord(name, -1, "search data is not an array"),),
        )
    kind = kind_for_shard(name)
    strip_serial = has_serial_keys(records)
    entries: list[Entry] = []
    skipped: list[MalformedRecord] = []
    for position, record in enumerate(records):
        record_entries, record_skipped = entries_from_record(record, name, position, kind, strip_serial)
        entries.extend(record_entries)
        skipped.extend(record_skipped)
    return ShardTable(name=name, entries=tuple(entries), source=source, skipped=tuple(skipped))


def parse_search_data(text: str, name: str, source: str | None = None) -> ShardTable:
    """Parse the JavaScript text of one search table.

    The array literal only holds strings, integers and nested arrays, so it
    is read with ``ast.literal_eval``. Anything else yields an empty shard
    carrying a single whole-shard malformed record.
    """
    body = _strip_assignment(text)
    if not body:
        return ShardTable(name=name, source=source)
    try:
        records = ast.literal_eval(body)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
        return ShardTable(
            name=name,
            source=source,
            skipped=(MalformedRecord(name, -1, f"unreadable search data: {exc.__class__.__name__}"),),
        )
    return parse_records(records, name, source)


__all__ = [
    "KIND_BY_FAMILY",
    "entries_from_record",
    "has_serial_keys",
    "infer_kind",
    "is_shard_file_name",
    "kind_for_shard",
    "parse_records",
    "parse_search_data",
    "shard_family",
    "strip_key_serial",
]
