from __future__ import annotations

from collections.abc import Mapping
from typing import Optional, Sequence

from table_rows.core.model import Row


def is_row_expanded(row: Row, expanded: frozenset[str], manual_expanded_key: Optional[str] = "expanded") -> bool:
    """A row is expanded when its id is in the set, or its record carries a truthy manual key."""
    if row.id in expanded:
        return True
    if manual_expanded_key and isinstance(row.original, Mapping):
        return bool(row.original.get(manual_expanded_key))
    return False


def expand_rows(
    rows: Sequence[Row],
    expanded: frozenset[str],
    *,
    manual_expanded_key: Optional[str] = "expanded",
    expand_sub_rows: bool = True,
) -> tuple[Row, ...]:
    """Depth-first list of visible rows.

    Every row in `rows` is included; the children of a row are only visited
    when it is expanded, so collapsing a row hides its whole subtree.
    """

    out: list[Row] = []

    def _handle(row: Row) -> None:
        out.append(row)
        if expand_sub_rows and row.sub_rows and is_row_expanded(row, expanded, manual_expanded_key):
            for child in row.sub_rows:
                _handle(child)

    for row in rows:
        _handle(row)
    return tuple(out)


def visible_rows(
    rows: Sequence[Row],
    expanded: frozenset[str],
    *,
    paginate_expanded_rows: bool = True,
    manual_expanded_key: Optional[str] = "expanded",
    expand_sub_rows: bool = True,
) -> tuple[Row, ...]:
    if not paginate_expanded_rows:
        return tuple(rows)
    return expand_rows(
        rows,
        expanded,
        manual_expanded_key=manual_expanded_key,
        expand_sub_rows=expand_sub_rows,
    )
