from __future__ import annotations

from typing import Callable, Literal, Optional, Sequence, Union

from table_rows.core.errors import ConfigurationError
from table_rows.core.model import Column, SortDescriptor, TableOptions


SortAction = Literal["replace", "add", "toggle", "remove"]
SortBy = tuple[SortDescriptor, ...]
SortByUpdater = Union[Sequence[SortDescriptor], Callable[[SortBy], Sequence[SortDescriptor]]]


def select_sort_action(
    sort_by: SortBy,
    column: Column,
    *,
    desc: Optional[bool],
    multi: bool,
    options: TableOptions,
) -> SortAction:
    """Decide what a toggle does to sort_by.

    - multi (when multi-sort is enabled): toggle an existing column, else add it.
    - single: replace, unless the column is already the last descriptor, then toggle.
    - a toggle with no explicit direction removes the column once it has cycled
      past its first direction (asc -> desc -> removed for sort_desc_first=False).
    """

    existing_index = _find_index(sort_by, column.id)
    existing = sort_by[existing_index] if existing_index >= 0 else None

    action: SortAction
    if not options.disable_multi_sort and multi:
        action = "toggle" if existing is not None else "add"
    elif existing is not None and existing_index == len(sort_by) - 1:
        action = "toggle"
    else:
        action = "replace"

    if (
        action == "toggle"
        and existing is not None
        and not options.disable_sort_remove
        and desc is None
        and (not multi or not options.disable_multi_remove)
        and (
            (existing.desc and not column.sort_desc_first)
            or (not existing.desc and column.sort_desc_first)
        )
    ):
        action = "remove"

    return action


def toggle_sort_by(
    sort_by: SortBy,
    column: Column,
    *,
    desc: Optional[bool] = None,
    multi: bool = False,
    options: TableOptions,
) -> SortBy:
    action = select_sort_action(sort_by, column, desc=desc, multi=multi, options=options)
    first_desc = desc if desc is not None else column.sort_desc_first

    if action == "replace":
        return (SortDescriptor(id=column.id, desc=first_desc),)

    if action == "add":
        added = sort_by + (SortDescriptor(id=column.id, desc=first_desc),)
        limit = options.max_multi_sort_col_count
        if limit is not None and len(added) > limit:
            # Keep the latest n columns.
            added = added[len(added) - limit :]
        return added

    if action == "toggle":
        out: list[SortDescriptor] = []
        for d in sort_by:
            if d.id == column.id:
                out.append(SortDescriptor(id=d.id, desc=desc if desc is not None else not d.desc))
            else:
                out.append(d)
        return tuple(out)

    return clear_sort_by(sort_by, column.id)


def set_sort_by(sort_by: SortBy, updater: SortByUpdater) -> SortBy:
    new = updater(sort_by) if callable(updater) else updater
    return check_sort_by(new)


def check_sort_by(sort_by: Sequence[SortDescriptor]) -> SortBy:
    """Return sort_by as a tuple, rejecting a column id that appears twice."""
    seen: set[str] = set()
    for i, d in enumerate(sort_by):
        if d.id in seen:
            raise ConfigurationError(
                code="E_DUPLICATE_SORT_COLUMN",
                message=f"duplicate sort column: {d.id}",
                path=f"sort_by[{i}]",
            )
        seen.add(d.id)
    return tuple(sort_by)


def clear_sort_by(sort_by: SortBy, column_id: str) -> SortBy:
    return tuple(d for d in sort_by if d.id != column_id)


def _find_index(sort_by: SortBy, column_id: str) -> int:
    for i, d in enumerate(sort_by):
        if d.id == column_id:
            return i
    return -1
