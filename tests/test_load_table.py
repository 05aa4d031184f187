import pytest

from table_rows.core.errors import ConfigurationError, TableLoadError
from table_rows.core.io.load_table import build_columns, build_options, build_rows, build_table, load_table
from table_rows.core.model import SortDescriptor


def test_load_yaml_success(examples_dir):
    doc = load_table(str(examples_dir / "people.yaml"))
    assert [c["id"] for c in doc["columns"]] == ["name", "age", "visits", "actions"]
    assert isinstance(doc["rows"], list)

    table = build_table(doc)
    assert table.options.max_multi_sort_col_count == 2
    assert [r.id for r in table.rows] == ["0", "1", "2"]
    assert table.rows[0].sub_rows[0].sub_rows[1].values == {"name": "fay", "age": 1}


def test_load_initial_state(examples_dir):
    table = build_table(load_table(str(examples_dir / "people-initial-state.yaml")))
    assert table.state.sort_by == (SortDescriptor("name", True),)
    assert [r.id for r in table.visible_rows] == ["0", "2", "1", "1.0"]


def test_load_missing_file(examples_dir):
    with pytest.raises(TableLoadError) as ei:
        load_table(str(examples_dir / "does-not-exist.yaml"))
    assert ei.value.code == "E_FILE_NOT_FOUND"


def test_load_unsupported_format(tmp_path):
    p = tmp_path / "table.txt"
    p.write_text("hello", encoding="utf-8")
    with pytest.raises(TableLoadError) as ei:
        load_table(str(p))
    assert ei.value.code == "E_UNSUPPORTED_FORMAT"


def test_load_json_and_bad_json(tmp_path):
    good = tmp_path / "t.json"
    good.write_text('{"columns": ["a"], "rows": [{"a": 1}]}', encoding="utf-8")
    table = build_table(load_table(str(good)))
    assert table.columns[0].id == "a"

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(TableLoadError) as ei:
        load_table(str(bad))
    assert ei.value.code == "E_JSON_PARSE"


def test_top_level_must_be_mapping(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TableLoadError) as ei:
        load_table(str(p))
    assert ei.value.code == "E_INVALID_TOP_LEVEL"


def test_unknown_option_rejected():
    with pytest.raises(ConfigurationError) as ei:
        build_options({"paginate_expanded": True})
    assert ei.value.code == "E_UNKNOWN_OPTION"


def test_duplicate_initial_sort_column_rejected():
    with pytest.raises(ConfigurationError) as ei:
        build_options({}, {"sort_by": [{"id": "a"}, {"id": "a", "desc": True}]})
    assert ei.value.code == "E_DUPLICATE_SORT_COLUMN"


def test_build_rows_accepts_snake_case_sub_rows():
    rows = build_rows([{"a": 1, "sub_rows": [{"a": 2}]}])
    assert rows[0].sub_rows[0].id == "0.0"
    assert rows[0].sub_rows[0].depth == 1
    assert "sub_rows" not in rows[0].values


def test_build_rows_rejects_non_object_row():
    with pytest.raises(TableLoadError) as ei:
        build_rows([{"a": 1, "subRows": ["x"]}])
    assert ei.value.path == "rows[0].subRows[0]"


@pytest.mark.parametrize(
    "raw, path",
    [
        ({"max_multi_sort_col_count": "2"}, "options.max_multi_sort_col_count"),
        ({"max_multi_sort_col_count": True}, "options.max_multi_sort_col_count"),
        ({"max_multi_sort_col_count": -1}, "options.max_multi_sort_col_count"),
        ({"disable_multi_sort": "false"}, "options.disable_multi_sort"),
        ({"default_can_sort": 1}, "options.default_can_sort"),
        ({"manual_expanded_key": 3}, "options.manual_expanded_key"),
    ],
)
def test_option_values_are_type_checked(raw, path):
    with pytest.raises(TableLoadError) as ei:
        build_options(raw)
    assert ei.value.code == "E_INVALID_FIELD"
    assert ei.value.path == path


def test_option_values_accept_null_where_optional():
    opts = build_options({"max_multi_sort_col_count": None, "default_can_sort": None, "manual_expanded_key": None})
    assert opts.max_multi_sort_col_count is None
    assert opts.manual_expanded_key is None
    assert build_options({"max_multi_sort_col_count": 0}).max_multi_sort_col_count == 0


@pytest.mark.parametrize(
    "column, path",
    [
        ({"id": "a", "sort_desc_first": "false"}, "columns[0].sort_desc_first"),
        ({"id": "a", "has_accessor": 0}, "columns[0].has_accessor"),
        ({"id": "a", "can_sort": "yes"}, "columns[0].can_sort"),
        ({"id": "a", "header": 5}, "columns[0].header"),
    ],
)
def test_column_values_are_type_checked(column, path):
    with pytest.raises(TableLoadError) as ei:
        build_columns([column])
    assert ei.value.code == "E_INVALID_FIELD"
    assert ei.value.path == path


def test_initial_sort_direction_must_be_boolean():
    with pytest.raises(TableLoadError) as ei:
        build_options({}, {"sort_by": [{"id": "a", "desc": "false"}]})
    assert ei.value.path == "initial_state.sort_by[0].desc"


def test_camel_case_document_keys_are_normalized(tmp_path):
    p = tmp_path / "camel.yaml"
    p.write_text(
        "columns: [a]\ninitialState:\n  sortBy:\n    - {id: a, desc: true}\nrows:\n  - {a: 1}\n  - {a: 2}\n",
        encoding="utf-8",
    )
    doc = load_table(str(p))
    assert set(doc) == {"columns", "rows", "options", "initial_state", "__file__"}
    assert doc["options"] == {}

    table = build_table(doc)
    assert table.state.sort_by == (SortDescriptor("a", True),)
    assert [r.values["a"] for r in table.sorted_rows] == [2, 1]


def test_unknown_top_level_key_rejected(tmp_path):
    p = tmp_path / "extra.yaml"
    p.write_text("columns: [a]\nrows: []\ntitle: people\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as ei:
        load_table(str(p))
    assert ei.value.code == "E_UNKNOWN_KEY"
    assert "title" in ei.value.message
