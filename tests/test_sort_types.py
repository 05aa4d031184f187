from datetime import date

import pytest

from table_rows.core.errors import ConfigurationError
from table_rows.core.model import Column, Row
from table_rows.core.sort.sort_types import (
    BUILTIN_SORT_TYPES,
    alphanumeric,
    basic,
    datetime_,
    number,
    resolve_sort_method,
    string,
)


def _pair(a, b):
    return Row(id="0", index=0, values={"v": a}), Row(id="1", index=1, values={"v": b})


def test_alphanumeric_orders_digit_runs_numerically():
    assert alphanumeric(*_pair("item10", "item2"), "v") > 0
    assert alphanumeric(*_pair("item2", "item2"), "v") == 0
    assert alphanumeric(*_pair(3, 20), "v") < 0


def test_alphanumeric_is_case_sensitive_string_is_not():
    assert alphanumeric(*_pair("Banana", "apple"), "v") < 0
    assert string(*_pair("Banana", "apple"), "v") > 0


def test_number_strips_formatting():
    assert number(*_pair("$1,200", "300"), "v") > 0
    assert number(*_pair("n/a", 0), "v") < 0


def test_datetime_accepts_dates_and_iso_strings():
    assert datetime_(*_pair("2024-01-02", date(2023, 5, 1)), "v") > 0
    assert datetime_(*_pair("2024-01-02T10:00:00", "2024-01-02T09:00:00"), "v") > 0


def test_none_sorts_lowest():
    present = {"alphanumeric": "a", "basic": 1, "string": "a", "number": 1, "datetime": "2024-01-01"}
    for name, fn in BUILTIN_SORT_TYPES.items():
        assert fn(*_pair(None, present[name]), "v") < 0
        assert fn(*_pair(None, None), "v") == 0


def test_basic_compares_plain_values():
    assert basic(*_pair(2, 10), "v") < 0
    assert basic(*_pair("2", "10"), "v") > 0


def test_basic_falls_back_to_text_for_mixed_types():
    assert basic(*_pair(1, "a"), "v") < 0
    assert basic(*_pair("a", 2), "v") > 0
    assert basic(*_pair(1, 2), "v") < 0


def test_resolution_chain_prefers_column_then_user_then_builtin():
    def mine(a, b, column_id, desc):
        return 0

    assert resolve_sort_method(Column(id="c", sort_type=mine)) is mine
    assert resolve_sort_method(Column(id="c", sort_type="number"), {"number": mine}) is mine
    assert resolve_sort_method(Column(id="c", sort_type="number")) is number


def test_resolution_failure_names_column_and_type():
    with pytest.raises(ConfigurationError) as ei:
        resolve_sort_method(Column(id="price", sort_type="currency"))
    assert ei.value.code == "E_UNKNOWN_SORT_TYPE"
    assert "price" in str(ei.value)
    assert "currency" in str(ei.value)
