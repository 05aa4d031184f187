from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from table_rows.core.errors import ConfigurationError
from table_rows.core.model import Column, Row, SortFn


_DIGIT_RUN = re.compile(r"(\d+)")
_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def _compare_basic(a: Any, b: Any) -> int:
    if a == b:
        return 0
    return 1 if a > b else -1


def _natural_parts(text: str) -> list[Any]:
    # Digit runs compare numerically, everything else as text.
    parts = [p for p in _DIGIT_RUN.split(text) if p]
    return [int(p) if p.isdigit() else p for p in parts]


def _compare_natural(a: str, b: str) -> int:
    pa = _natural_parts(a)
    pb = _natural_parts(b)
    for x, y in zip(pa, pb):
        if isinstance(x, int) and isinstance(y, int):
            cmp = _compare_basic(x, y)
        elif isinstance(x, int):
            cmp = -1
        elif isinstance(y, int):
            cmp = 1
        else:
            cmp = _compare_basic(x, y)
        if cmp:
            return cmp
    return _compare_basic(len(pa), len(pb))


def _values(row_a: Row, row_b: Row, column_id: str) -> tuple[Any, Any]:
    return row_a.values.get(column_id), row_b.values.get(column_id)


def _none_first(a: Any, b: Any) -> Optional[int]:
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return None


def _to_text(v: Any) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def alphanumeric(row_a: Row, row_b: Row, column_id: str, desc: bool = False) -> int:
    a, b = _values(row_a, row_b, column_id)
    nulls = _none_first(a, b)
    if nulls is not None:
        return nulls
    return _compare_natural(_to_text(a), _to_text(b))


def _to_datetime(v: Any) -> Optional[datetime]:
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    if isinstance(v, str) and v.strip():
        try:
            return datetime.fromisoformat(v.strip())
        except ValueError:
            return None
    return None


def datetime_(row_a: Row, row_b: Row, column_id: str, desc: bool = False) -> int:
    a, b = _values(row_a, row_b, column_id)
    da, db = _to_datetime(a), _to_datetime(b)
    nulls = _none_first(da, db)
    if nulls is not None:
        return nulls
    assert da is not None and db is not None
    # Naive and aware values compare on wall-clock time.
    if (da.tzinfo is None) != (db.tzinfo is None):
        da, db = da.replace(tzinfo=None), db.replace(tzinfo=None)
    return _compare_basic(da, db)


def basic(row_a: Row, row_b: Row, column_id: str, desc: bool = False) -> int:
    a, b = _values(row_a, row_b, column_id)
    nulls = _none_first(a, b)
    if nulls is not None:
        return nulls
    try:
        return _compare_basic(a, b)
    except TypeError:
        # Values that do not order against each other compare on their text.
        return _compare_basic(_to_text(a), _to_text(b))


def string(row_a: Row, row_b: Row, column_id: str, desc: bool = False) -> int:
    a, b = _values(row_a, row_b, column_id)
    nulls = _none_first(a, b)
    if nulls is not None:
        return nulls
    return _compare_natural(_to_text(a).lower(), _to_text(b).lower())


def _to_number(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return float(v)
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        cleaned = _NON_NUMERIC.sub("", v)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def number(row_a: Row, row_b: Row, column_id: str, desc: bool = False) -> int:
    a, b = _values(row_a, row_b, column_id)
    na, nb = _to_number(a), _to_number(b)
    nulls = _none_first(na, nb)
    if nulls is not None:
        return nulls
    return _compare_basic(na, nb)


BUILTIN_SORT_TYPES: dict[str, SortFn] = {
    "alphanumeric": alphanumeric,
    "datetime": datetime_,
    "basic": basic,
    "string": string,
    "number": number,
}


def resolve_sort_method(
    column: Column, user_sort_types: Optional[Mapping[str, SortFn]] = None
) -> SortFn:
    """Resolve a column's comparator.

    Lookup order: column callable, user registry by name, built-in registry by name.
    """

    sort_type = column.sort_type
    if callable(sort_type):
        return sort_type

    method = (user_sort_types or {}).get(sort_type) or BUILTIN_SORT_TYPES.get(sort_type)
    if method is None:
        raise ConfigurationError(
            code="E_UNKNOWN_SORT_TYPE",
            message=f"could not find a valid sort type of '{sort_type}' for column '{column.id}'",
            path=f"columns.{column.id}.sort_type",
        )
    return method
