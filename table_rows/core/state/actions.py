from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from table_rows.core.sort.toggle import SortByUpdater


@dataclass(frozen=True)
class Init:
    pass


@dataclass(frozen=True)
class ToggleSortBy:
    column_id: str
    desc: Optional[bool] = None
    multi: bool = False


@dataclass(frozen=True)
class SetSortBy:
    updater: SortByUpdater


@dataclass(frozen=True)
class ResetSortBy:
    pass


@dataclass(frozen=True)
class ClearSortBy:
    column_id: str


@dataclass(frozen=True)
class ToggleRowExpanded:
    id: str
    value: Optional[bool] = None


@dataclass(frozen=True)
class ToggleAllRowsExpanded:
    value: Optional[bool] = None


@dataclass(frozen=True)
class ResetExpanded:
    pass


Action = Union[
    Init,
    ToggleSortBy,
    SetSortBy,
    ResetSortBy,
    ClearSortBy,
    ToggleRowExpanded,
    ToggleAllRowsExpanded,
    ResetExpanded,
]
