from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from table_rows.core.errors import ConfigurationError
from table_rows.core.expand.expand_rows import visible_rows as derive_visible_rows
from table_rows.core.expand.expanded import find_expanded_depth, is_all_rows_expanded
from table_rows.core.model import (
    Column,
    Row,
    SortDescriptor,
    SortFn,
    TableOptions,
    TableState,
    flatten_rows,
)
from table_rows.core.sort.sort_rows import OrderByFn, SortedRows, default_order_by, sort_rows
from table_rows.core.sort.toggle import SortByUpdater, check_sort_by
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
from table_rows.core.state.reducer import ReducerContext, reduce

logger = logging.getLogger(__name__)


StateReducer = Callable[[TableState, Action, TableState], TableState]


@dataclass(frozen=True)
class ColumnSortState:
    can_sort: bool
    is_sorted: bool
    sorted_index: int
    is_sorted_desc: Optional[bool]


class Table:
    """Host container for one table: owns state and the row tree, derives visible rows.

    All state changes go through dispatch(). Derived sequences are cached and
    recomputed only when one of their inputs in state or data changes.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Sequence[Row],
        options: Optional[TableOptions] = None,
        *,
        user_sort_types: Optional[Mapping[str, SortFn]] = None,
        order_by_fn: OrderByFn = default_order_by,
        state_reducer: Optional[StateReducer] = None,
    ) -> None:
        self.columns: tuple[Column, ...] = _check_columns(columns)
        self.options = options or TableOptions()
        self.user_sort_types = dict(user_sort_types or {})
        self.order_by_fn = order_by_fn
        self.state_reducer = state_reducer

        self._rows: tuple[Row, ...] = tuple(rows)
        self._data_version = 0
        self._data_change_hooks: list[Callable[["Table"], None]] = []
        self._cache: dict[str, tuple[Any, Any]] = {}

        initial = self.options.initial_state
        self._state = TableState(sort_by=check_sort_by(initial.sort_by), expanded=frozenset(initial.expanded))
        self.dispatch(Init())

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def dispatch(self, action: Action) -> TableState:
        ctx = ReducerContext(
            columns=self.columns,
            options=self.options,
            row_ids=tuple(self.rows_by_id.keys()),
        )
        previous = self._state
        new_state = reduce(previous, action, ctx)
        if self.state_reducer is not None:
            new_state = self.state_reducer(new_state, action, previous)
        self._state = new_state
        logger.debug(
            "dispatch %s: sort_by=%s expanded=%d",
            type(action).__name__,
            [(d.id, d.desc) for d in new_state.sort_by],
            len(new_state.expanded),
        )
        return new_state

    def toggle_sort_by(self, column_id: str, desc: Optional[bool] = None, multi: bool = False) -> TableState:
        if not self.column_sort_state(column_id).can_sort:
            raise ConfigurationError(
                code="E_COLUMN_NOT_SORTABLE",
                message=f"column '{column_id}' cannot be sorted",
                path=f"columns.{column_id}",
            )
        return self.dispatch(ToggleSortBy(column_id=column_id, desc=desc, multi=multi))

    def set_sort_by(self, updater: SortByUpdater) -> TableState:
        return self.dispatch(SetSortBy(updater=updater))

    def reset_sort_by(self) -> TableState:
        return self.dispatch(ResetSortBy())

    def clear_sort_by(self, column_id: str) -> TableState:
        return self.dispatch(ClearSortBy(column_id=column_id))

    def toggle_row_expanded(self, row_id: str, value: Optional[bool] = None) -> TableState:
        return self.dispatch(ToggleRowExpanded(id=row_id, value=value))

    def toggle_all_rows_expanded(self, value: Optional[bool] = None) -> TableState:
        return self.dispatch(ToggleAllRowsExpanded(value=value))

    def reset_expanded(self) -> TableState:
        return self.dispatch(ResetExpanded())

    def on_data_change(self, hook: Callable[["Table"], None]) -> None:
        self._data_change_hooks.append(hook)

    def set_data(self, rows: Sequence[Row]) -> None:
        """Swap the row tree, then run auto-reset before anything derives from it."""
        self._rows = tuple(rows)
        self._data_version += 1

        if self.options.auto_reset_sort_by and not self.options.manual_sort_by:
            logger.debug("data changed: resetting sort_by")
            self.reset_sort_by()
        if self.options.auto_reset_expanded:
            logger.debug("data changed: resetting expanded")
            self.reset_expanded()
        for hook in self._data_change_hooks:
            hook(self)

    @property
    def rows_by_id(self) -> dict[str, Row]:
        return self._memo(
            "rows_by_id",
            (self._data_version,),
            lambda: {r.id: r for r in flatten_rows(self._rows)},
        )

    @property
    def _sorted(self) -> SortedRows:
        return self._memo(
            "sorted",
            (self._data_version, self._state.sort_by),
            lambda: sort_rows(
                self._rows,
                self._state.sort_by,
                self.columns,
                self.options,
                user_sort_types=self.user_sort_types,
                order_by_fn=self.order_by_fn,
            ),
        )

    @property
    def sorted_rows(self) -> tuple[Row, ...]:
        return self._sorted.rows

    @property
    def sorted_flat_rows(self) -> tuple[Row, ...]:
        return self._sorted.flat_rows

    ordered_rows = sorted_rows
    flattened_ordered_rows = sorted_flat_rows

    @property
    def visible_rows(self) -> tuple[Row, ...]:
        return self._memo(
            "visible",
            (self._data_version, self._state.sort_by, self._state.expanded),
            lambda: derive_visible_rows(
                self.sorted_rows,
                self._state.expanded,
                paginate_expanded_rows=self.options.paginate_expanded_rows,
                manual_expanded_key=self.options.manual_expanded_key,
                expand_sub_rows=self.options.expand_sub_rows,
            ),
        )

    @property
    def expanded_depth(self) -> int:
        return find_expanded_depth(self._state.expanded)

    max_expanded_depth = expanded_depth

    @property
    def is_all_rows_expanded(self) -> bool:
        return is_all_rows_expanded(self._state.expanded, self.rows_by_id.keys())

    def column_sort_state(self, column_id: str) -> ColumnSortState:
        column = self.get_column(column_id)
        sorted_index = -1
        current: Optional[SortDescriptor] = None
        for i, d in enumerate(self._state.sort_by):
            if d.id == column_id:
                sorted_index, current = i, d
                break
        return ColumnSortState(
            can_sort=self._can_sort(column),
            is_sorted=current is not None,
            sorted_index=sorted_index,
            is_sorted_desc=current.desc if current is not None else None,
        )

    def get_column(self, column_id: str) -> Column:
        for c in self.columns:
            if c.id == column_id:
                return c
        raise ConfigurationError(
            code="E_UNKNOWN_COLUMN",
            message=f"unknown column: {column_id}",
            path="columns",
        )

    def _can_sort(self, column: Column) -> bool:
        if column.has_accessor:
            return not (column.disable_sort_by or self.options.disable_sort_by)
        for candidate in (self.options.default_can_sort, column.can_sort):
            if candidate is not None:
                return candidate
        return False

    def _memo(self, name: str, key: tuple[Any, ...], compute: Callable[[], Any]) -> Any:
        hit = self._cache.get(name)
        if hit is not None and hit[0] == key:
            return hit[1]
        logger.debug("recomputing %s", name)
        value = compute()
        self._cache[name] = (key, value)
        return value


def _check_columns(columns: Sequence[Column]) -> tuple[Column, ...]:
    seen: set[str] = set()
    for c in columns:
        if c.id in seen:
            raise ConfigurationError(
                code="E_DUPLICATE_COLUMN",
                message=f"duplicate column id: {c.id}",
                path=f"columns.{c.id}",
            )
        seen.add(c.id)
    return tuple(columns)
