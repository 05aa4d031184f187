from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from table_rows.core.errors import ConfigurationError
from table_rows.core.expand.expanded import toggle_all_rows_expanded, toggle_row_expanded
from table_rows.core.model import Column, TableOptions, TableState
from table_rows.core.sort.toggle import clear_sort_by, set_sort_by, toggle_sort_by
from table_rows.core.state.actions import (
    Action,
    ClearSortBy,
    Init,
    ResetExpanded,
    ResetSortBy,
    SetSortBy,
    ToggleAllRowsExpanded,
    ToggleRowExpanded,
    ToggleSortBy,
)


@dataclass(frozen=True)
class ReducerContext:
    columns: Sequence[Column]
    options: TableOptions
    row_ids: Sequence[str]


def reduce(state: TableState, action: Action, ctx: ReducerContext) -> TableState:
    """Pure transition: (state, action) -> state."""

    if isinstance(action, Init):
        return state

    if isinstance(action, ToggleSortBy):
        column = _find_column(ctx.columns, action.column_id)
        sort_by = toggle_sort_by(
            state.sort_by, column, desc=action.desc, multi=action.multi, options=ctx.options
        )
        return replace(state, sort_by=sort_by)

    if isinstance(action, SetSortBy):
        return replace(state, sort_by=set_sort_by(state.sort_by, action.updater))

    if isinstance(action, ResetSortBy):
        return replace(state, sort_by=tuple(ctx.options.initial_state.sort_by))

    if isinstance(action, ClearSortBy):
        return replace(state, sort_by=clear_sort_by(state.sort_by, action.column_id))

    if isinstance(action, ToggleRowExpanded):
        expanded, _ = toggle_row_expanded(state.expanded, action.id, action.value)
        return replace(state, expanded=expanded)

    if isinstance(action, ToggleAllRowsExpanded):
        expanded, _ = toggle_all_rows_expanded(state.expanded, ctx.row_ids, action.value)
        return replace(state, expanded=expanded)

    if isinstance(action, ResetExpanded):
        return replace(state, expanded=frozenset(ctx.options.initial_state.expanded))

    raise TypeError(f"unknown action: {action!r}")


def _find_column(columns: Sequence[Column], column_id: str) -> Column:
    for c in columns:
        if c.id == column_id:
            return c
    raise ConfigurationError(
        code="E_UNKNOWN_COLUMN",
        message=f"cannot toggle sort for unknown column: {column_id}",
        path="sort_by",
    )
