from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union


SortFn = Callable[["Row", "Row", str, bool], int]


@dataclass(frozen=True, order=True)
class RowPath:
    """Hierarchical row identifier: one sibling index per level."""

    segments: tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> "RowPath":
        if not text:
            raise ValueError("row path must be a non-empty string")
        try:
            segments = tuple(int(part) for part in text.split("."))
        except ValueError as e:
            raise ValueError(f"invalid row path: {text!r}") from e
        if any(s < 0 for s in segments):
            raise ValueError(f"invalid row path: {text!r}")
        return cls(segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    def child(self, index: int) -> "RowPath":
        return RowPath(self.segments + (index,))

    def is_ancestor_of(self, other: "RowPath") -> bool:
        n = len(self.segments)
        return n < len(other.segments) and other.segments[:n] == self.segments

    def is_descendant_of(self, other: "RowPath") -> bool:
        return other.is_ancestor_of(self)

    def __str__(self) -> str:
        return ".".join(str(s) for s in self.segments)


@dataclass(frozen=True)
class Row:
    id: str
    index: int
    depth: int = 0
    values: Mapping[str, Any] = field(default_factory=dict)
    original: Any = None
    sub_rows: tuple["Row", ...] = ()

    @property
    def can_expand(self) -> bool:
        return len(self.sub_rows) > 0

    @property
    def path(self) -> RowPath:
        return RowPath.parse(self.id)


@dataclass(frozen=True)
class Column:
    id: str
    header: Optional[str] = None
    sort_type: Union[str, SortFn] = "alphanumeric"
    sort_desc_first: bool = False
    sort_inverted: bool = False
    disable_sort_by: bool = False
    has_accessor: bool = True
    # Only consulted for columns without an accessor.
    can_sort: Optional[bool] = None


@dataclass(frozen=True)
class SortDescriptor:
    id: str
    desc: bool = False


@dataclass(frozen=True)
class TableState:
    sort_by: tuple[SortDescriptor, ...] = ()
    expanded: frozenset[str] = frozenset()


@dataclass(frozen=True)
class TableOptions:
    manual_sort_by: bool = False
    max_multi_sort_col_count: Optional[int] = None
    disable_multi_sort: bool = False
    disable_sort_remove: bool = False
    disable_multi_remove: bool = False
    disable_sort_by: bool = False
    default_can_sort: Optional[bool] = None

    paginate_expanded_rows: bool = True
    expand_sub_rows: bool = True
    manual_expanded_key: Optional[str] = "expanded"

    auto_reset_sort_by: bool = True
    auto_reset_expanded: bool = True

    initial_state: TableState = field(default_factory=TableState)


def flatten_rows(rows: tuple[Row, ...]) -> tuple[Row, ...]:
    """Depth-first pre-order flattening of a row tree."""
    out: list[Row] = []

    def _walk(level: tuple[Row, ...]) -> None:
        for row in level:
            out.append(row)
            _walk(row.sub_rows)

    _walk(rows)
    return tuple(out)
