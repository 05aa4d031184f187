from table_rows.core.expand.expand_rows import expand_rows, visible_rows
from table_rows.core.io.load_table import build_rows


def _ids(rows):
    return [r.id for r in rows]


def test_collapsed_tree_shows_roots_only(people):
    assert _ids(expand_rows(people, frozenset())) == ["0", "1", "2"]


def test_expanding_root_shows_direct_children_only(people):
    out = expand_rows(people, frozenset({"0"}))
    assert _ids(out) == ["0", "0.0", "0.1", "0.2", "1", "2"]


def test_expanding_child_reveals_grandchildren(people):
    out = expand_rows(people, frozenset({"0", "0.0"}))
    assert _ids(out) == ["0", "0.0", "0.0.0", "0.0.1", "0.1", "0.2", "1", "2"]


def test_collapse_is_deep(people):
    assert _ids(expand_rows(people, frozenset({"0.0"}))) == ["0", "1", "2"]


def test_stale_ids_are_ignored(people):
    assert _ids(expand_rows(people, frozenset({"9", "4.2.1"}))) == ["0", "1", "2"]


def test_manual_expanded_key_on_record(records):
    records[1]["expanded"] = True
    rows = build_rows(records)

    assert _ids(expand_rows(rows, frozenset())) == ["0", "1", "1.0", "2"]
    assert _ids(expand_rows(rows, frozenset(), manual_expanded_key=None)) == ["0", "1", "2"]


def test_expand_sub_rows_disabled(people):
    assert _ids(expand_rows(people, frozenset({"0"}), expand_sub_rows=False)) == ["0", "1", "2"]


def test_paginate_expanded_rows_disabled_returns_rows_unchanged(people):
    out = visible_rows(people, frozenset({"0"}), paginate_expanded_rows=False)
    assert out == tuple(people)
