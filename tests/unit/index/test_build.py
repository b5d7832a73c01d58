"""Tests for index construction and exact lookup.

Covers de-duplication across shards, overload retention, kind upgrades,
and the malformed/duplicate-shard diagnostics in the build report.
"""

from __future__ import annotations

import unittest

from docindex.index import Entry, EntryKind, MalformedRecord, ShardTable, SymbolIndex, build


def _entry(key: str, url: str, display: str | None = None, scope: tuple[str, ...] = (), kind=EntryKind.OTHER) -> Entry:
    return Entry(key=key, display_name=display if display is not None else key, target_url=url, scope=scope, kind=kind)


class BuildBehaviorTests(unittest.TestCase):
    def test_identical_tuples_across_shards_collapse_to_one_entry(self) -> None:
        first = ShardTable(name="all_1.js", entries=(_entry("identity", "/c.html"),))
        second = ShardTable(name="all_1.js", entries=(_entry("identity", "/c.html"),))

        index, report = build([first, second])

        self.assertEqual(len(index), 1)
        self.assertEqual(report.entries_seen, 2)
        self.assertEqual(report.entries_kept, 1)
        self.assertEqual(report.duplicates_collapsed, 1)
        self.assertEqual(report.duplicate_shard_names, ())

    def test_same_key_and_scope_with_different_urls_are_kept_as_overloads(self) -> None:
        shard = ShardTable(
            name="functions_0.js",
            entries=(
                _entry("swap", "/a.html#a1", scope=("sequoia",)),
                _entry("swap", "/a.html#a2", scope=("sequoia",)),
            ),
        )

        index, _ = build([shard])

        self.assertEqual([entry.target_url for entry in index], ["/a.html#a1", "/a.html#a2"])

    def test_invalid_entries_are_skipped_and_reported(self) -> None:
        shard = ShardTable(
            name="all_2.js",
            entries=(
                _entry("checker", "/a.html"),
                _entry("broken", ""),
                _entry("", "/b.html"),
            ),
            skipped=(MalformedRecord("all_2.js", 7, "missing target_url"),),
        )

        index, report = build([shard])

        self.assertEqual([entry.key for entry in index], ["checker"])
        self.assertEqual(report.skipped_count, 3)
        reasons = sorted(record.reason for record in report.malformed)
        self.assertEqual(reasons, ["missing key", "missing target_url", "missing target_url"])

    def test_build_with_no_shards_yields_empty_queryable_index(self) -> None:
        index, report = build([])

        self.assertEqual(len(index), 0)
        self.assertEqual(index.query("anything"), ())
        self.assertEqual(report.shard_count, 0)

    def test_same_name_with_different_content_is_reported_and_merged(self) -> None:
        old = ShardTable(name="classes_3.js", entries=(_entry("data", "/d.html"), _entry("data_pool", "/p.html")))
        new = ShardTable(name="classes_3.js", entries=(_entry("data", "/d.html"), _entry("data_sharing", "/s.html")))

        index, report = build([old, new])

        self.assertEqual([entry.key for entry in index], ["data", "data_pool", "data_sharing"])
        self.assertEqual(report.duplicate_shard_names, ("classes_3.js",))

    def test_duplicate_with_specific_kind_upgrades_generic_entry_in_place(self) -> None:
        mixed = ShardTable(
            name="all_2.js",
            entries=(_entry("checker", "/c.html"), _entry("connectivity", "/k.html")),
        )
        typed = ShardTable(name="classes_2.js", entries=(_entry("checker", "/c.html", kind=EntryKind.TYPE),))

        index, _ = build([mixed, typed])

        self.assertEqual([entry.key for entry in index], ["checker", "connectivity"])
        self.assertIs(index.entries[0].kind, EntryKind.TYPE)

    def test_specific_kind_is_not_overwritten_by_later_duplicate(self) -> None:
        typed = ShardTable(name="classes_2.js", entries=(_entry("checker", "/c.html", kind=EntryKind.TYPE),))
        other = ShardTable(name="files_2.js", entries=(_entry("checker", "/c.html", kind=EntryKind.FILE),))

        index, _ = build([typed, other])

        self.assertIs(index.entries[0].kind, EntryKind.TYPE)


class ExactLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        shard = ShardTable(
            name="all_2.js",
            entries=(
                _entry("checker", "/a.html", scope=("sequoia", "unit_testing"), kind=EntryKind.TYPE),
                _entry("connectivity_2ehpp", "/k_8hpp.html", display="Connectivity.hpp", kind=EntryKind.FILE),
            ),
        )
        self.index, _ = build([shard])

    def test_get_round_trips_every_entry(self) -> None:
        for entry in self.index:
            self.assertEqual(self.index.get(entry.key, entry.scope, entry.target_url), entry)

    def test_get_accepts_scope_label_and_list_forms(self) -> None:
        expected = self.index.entries[0]

        self.assertEqual(self.index.get("checker", "sequoia::unit_testing", "/a.html"), expected)
        self.assertEqual(self.index.get("checker", ["sequoia", "unit_testing"], "/a.html"), expected)

    def test_get_reports_not_found_without_raising(self) -> None:
        self.assertIsNone(self.index.get("checker", (), "/a.html"))
        self.assertIsNone(self.index.get("missing", (), "/x.html"))
        self.assertIsNone(self.index.get(None, (), "/a.html"))
        self.assertIsNone(self.index.get("checker", {"sequoia": 1}, "/a.html"))
        self.assertIsNone(self.index.get("checker", [["unhashable"]], "/a.html"))
        self.assertIsNone(self.index.get("checker", ("sequoia", "unit_testing"), 42))

    def test_index_is_read_only(self) -> None:
        self.assertIsInstance(self.index.entries, tuple)
        with self.assertRaises(AttributeError):
            self.index.extra = 1  # type: ignore[attr-defined]

    def test_contains_checks_full_entry(self) -> None:
        entry = self.index.entries[0]

        self.assertIn(entry, self.index)
        self.assertNotIn(_entry("checker", "/a.html"), self.index)
        self.assertNotIn("checker", self.index)

    def test_direct_construction_matches_build_order(self) -> None:
        index = SymbolIndex([_entry("b", "/b.html"), _entry("a", "/a.html")])

        self.assertEqual([entry.key for entry in index], ["b", "a"])
        self.assertEqual(repr(index), "SymbolIndex(entries=2)")

    def test_direct_construction_collapses_repeats_and_drops_invalid_entries(self) -> None:
        entry = _entry("identity", "/c.html")
        generic = _entry("checker", "/a.html")
        typed = _entry("checker", "/a.html", kind=EntryKind.TYPE)

        index = SymbolIndex([entry, entry, generic, typed, _entry("", "/x.html"), _entry("x", "")])

        self.assertEqual([item.key for item in index], ["identity", "checker"])
        self.assertIs(index.entries[1].kind, EntryKind.TYPE)
        self.assertEqual(index.get("checker", (), "/a.html"), index.entries[1])
        self.assertEqual(len(SymbolIndex([entry, entry])), 1)


class TypeCheckedBuildTests(unittest.TestCase):
    def _build_with(self, bad: Entry) -> tuple[SymbolIndex, object]:
        good = _entry("checker", "/a.html")
        return build([ShardTable(name="all_2.js", entries=(good, bad))])

    def test_non_string_display_name_is_reported_not_raised(self) -> None:
        bad = Entry(key="broken", display_name=None, target_url="/b.html")  # type: ignore[arg-type]

        index, report = self._build_with(bad)

        self.assertEqual([entry.key for entry in index], ["checker"])
        self.assertEqual(report.malformed[0].reason, "display_name is not a string")
        self.assertEqual(report.malformed[0].position, 1)

    def test_list_scope_is_reported_not_raised(self) -> None:
        bad = Entry(key="broken", display_name="broken", target_url="/b.html", scope=["sequoia"])  # type: ignore[arg-type]

        index, report = self._build_with(bad)

        self.assertEqual([entry.key for entry in index], ["checker"])
        self.assertEqual(report.malformed[0].reason, "scope is not a tuple of strings")

    def test_non_string_scope_part_and_url_are_reported(self) -> None:
        bad_scope = Entry(key="broken", display_name="broken", target_url="/b.html", scope=("ns", 3))  # type: ignore[arg-type]
        bad_url = Entry(key="broken", display_name="broken", target_url=7)  # type: ignore[arg-type]
        bad_kind = Entry(key="broken", display_name="broken", target_url="/b.html", kind="type")  # type: ignore[arg-type]

        index, report = build([ShardTable(name="all_2.js", entries=(bad_scope, bad_url, bad_kind))])

        self.assertEqual(len(index), 0)
        self.assertEqual(
            [record.reason for record in report.malformed],
            ["scope is not a tuple of strings", "missing target_url", "kind is not an EntryKind"],
        )

    def test_non_string_key_is_reported(self) -> None:
        bad = Entry(key=None, display_name="broken", target_url="/b.html")  # type: ignore[arg-type]

        index, report = self._build_with(bad)

        self.assertEqual(len(index), 1)
        self.assertEqual(report.malformed[0].reason, "missing key")

    def test_same_named_shards_with_unhashable_entries_do_not_raise(self) -> None:
        bad = Entry(key="broken", display_name="broken", target_url="/b.html", scope=["ns"])  # type: ignore[arg-type]
        first = ShardTable(name="all_2.js", entries=(_entry("checker", "/a.html"), bad))
        second = ShardTable(name="all_2.js", entries=(_entry("checker", "/a.html"),))

        index, report = build([first, second])

        self.assertEqual(len(index), 1)
        self.assertEqual(report.duplicate_shard_names, ("all_2.js",))


if __name__ == "__main__":
    unittest.main()
