from __future__ import annotations

from typing import Iterable, Optional


Expanded = frozenset[str]


def toggle_row_expanded(
    expanded: Expanded, row_id: str, value: Optional[bool] = None
) -> tuple[Expanded, bool]:
    """Set (or flip) one row's membership.

    Returns (new_expanded, value). The value is echoed even when nothing changed.
    """

    exists = row_id in expanded
    value = value if value is not None else not exists

    if value and not exists:
        return expanded | {row_id}, value
    if exists and not value:
        return expanded - {row_id}, value
    return expanded, value


def is_all_rows_expanded(expanded: Expanded, row_ids: Iterable[str]) -> bool:
    ids = list(row_ids)
    if not ids or not expanded:
        return False
    return all(rid in expanded for rid in ids)


def toggle_all_rows_expanded(
    expanded: Expanded, row_ids: Iterable[str], value: Optional[bool] = None
) -> tuple[Expanded, bool]:
    ids = list(row_ids)
    value = value if value is not None else not is_all_rows_expanded(expanded, ids)
    if value:
        return frozenset(ids), value
    return frozenset(), value


def find_expanded_depth(expanded: Iterable[str]) -> int:
    """Greatest number of path segments across expanded ids (0 when empty)."""
    return max((len(row_id.split(".")) for row_id in expanded), default=0)
