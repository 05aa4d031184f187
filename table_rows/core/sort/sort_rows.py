from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Callable, Mapping, Optional, Sequence

from table_rows.core.model import Column, Row, SortDescriptor, SortFn, TableOptions, flatten_rows
from table_rows.core.sort.sort_types import resolve_sort_method

logger = logging.getLogger(__name__)


RowCompare = Callable[[Row, Row], int]
OrderByFn = Callable[[Sequence[Row], Sequence[RowCompare], Sequence[bool]], list[Row]]


@dataclass(frozen=True)
class SortedRows:
    rows: tuple[Row, ...]
    flat_rows: tuple[Row, ...]


def default_order_by(
    rows: Sequence[Row], sort_fns: Sequence[RowCompare], dirs: Sequence[bool]
) -> list[Row]:
    """Order rows by comparators in priority order.

    dirs[i] is True for ascending. Full ties fall back to the original index,
    in the direction of the primary key.
    """

    def _compare(row_a: Row, row_b: Row) -> int:
        for sort_fn, ascending in zip(sort_fns, dirs):
            sort_int = sort_fn(row_a, row_b)
            if sort_int != 0:
                return sort_int if ascending else -sort_int
        if not dirs or dirs[0]:
            return row_a.index - row_b.index
        return row_b.index - row_a.index

    return sorted(rows, key=cmp_to_key(_compare))


def sort_rows(
    rows: Sequence[Row],
    sort_by: Sequence[SortDescriptor],
    columns: Sequence[Column],
    options: TableOptions,
    *,
    user_sort_types: Optional[Mapping[str, SortFn]] = None,
    order_by_fn: OrderByFn = default_order_by,
) -> SortedRows:
    """Return the ordered tree and its depth-first flattening.

    Descriptors for unknown columns are dropped. Sub-rows are sorted
    recursively with the same sort_by; a single sub-row is left as is.
    """

    rows = tuple(rows)
    if options.manual_sort_by or not sort_by:
        return SortedRows(rows=rows, flat_rows=flatten_rows(rows))

    columns_by_id = {c.id: c for c in columns}
    available = [s for s in sort_by if s.id in columns_by_id]
    if len(available) != len(sort_by):
        dropped = [s.id for s in sort_by if s.id not in columns_by_id]
        logger.debug("dropping sort descriptors for unknown columns: %s", dropped)
    if not available:
        return SortedRows(rows=rows, flat_rows=flatten_rows(rows))

    sort_fns: list[RowCompare] = []
    dirs: list[bool] = []
    for sort in available:
        column = columns_by_id[sort.id]
        method = resolve_sort_method(column, user_sort_types)
        sort_fns.append(_bind(method, sort))
        # sort_inverted columns read "desc" as ascending.
        dirs.append(sort.desc if column.sort_inverted else not sort.desc)

    def _sort_level(level: Sequence[Row]) -> tuple[Row, ...]:
        ordered = order_by_fn(level, sort_fns, dirs)
        out: list[Row] = []
        for row in ordered:
            if len(row.sub_rows) > 1:
                row = replace(row, sub_rows=_sort_level(row.sub_rows))
            out.append(row)
        return tuple(out)

    ordered_rows = _sort_level(rows)
    logger.debug("sorted %d root rows by %s", len(ordered_rows), [(s.id, s.desc) for s in available])
    return SortedRows(rows=ordered_rows, flat_rows=flatten_rows(ordered_rows))


def _bind(method: SortFn, sort: SortDescriptor) -> RowCompare:
    def _fn(row_a: Row, row_b: Row) -> int:
        return method(row_a, row_b, sort.id, sort.desc)

    return _fn
