from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from table_rows.core.errors import ConfigurationError, TableLoadError
from table_rows.core.model import Column, Row, RowPath, SortDescriptor, TableOptions, TableState
from table_rows.core.table import Table


SUB_ROW_KEYS = ("subRows", "sub_rows")
COLUMN_FIELDS = {f.name for f in fields(Column)}
OPTION_FIELDS = {f.name for f in fields(TableOptions)} - {"initial_state"}

# camelCase spellings accepted for document keys.
KEY_ALIASES = {"initialState": "initial_state", "sortBy": "sort_by"}
DOCUMENT_KEYS = ("columns", "rows", "options", "initial_state")

_PARSERS: dict[str, tuple[str, Callable[[str], Any]]] = {
    ".yaml": ("E_YAML_PARSE", yaml.safe_load),
    ".yml": ("E_YAML_PARSE", yaml.safe_load),
    ".json": ("E_JSON_PARSE", json.loads),
}


def _is_bool(v: Any) -> bool:
    return isinstance(v, bool)


def _is_optional_bool(v: Any) -> bool:
    return v is None or isinstance(v, bool)


def _is_optional_str(v: Any) -> bool:
    return v is None or isinstance(v, str)


def _is_optional_count(v: Any) -> bool:
    return v is None or (isinstance(v, int) and not isinstance(v, bool) and v >= 0)


_BOOL = (_is_bool, "a boolean")
_OPTIONAL_BOOL = (_is_optional_bool, "a boolean or null")
_OPTIONAL_STR = (_is_optional_str, "a string or null")

COLUMN_VALUE_CHECKS = {
    "header": _OPTIONAL_STR,
    "sort_desc_first": _BOOL,
    "sort_inverted": _BOOL,
    "disable_sort_by": _BOOL,
    "has_accessor": _BOOL,
    "can_sort": _OPTIONAL_BOOL,
}
OPTION_VALUE_CHECKS = {
    "manual_sort_by": _BOOL,
    "max_multi_sort_col_count": (_is_optional_count, "a non-negative integer or null"),
    "disable_multi_sort": _BOOL,
    "disable_sort_remove": _BOOL,
    "disable_multi_remove": _BOOL,
    "disable_sort_by": _BOOL,
    "default_can_sort": _OPTIONAL_BOOL,
    "paginate_expanded_rows": _BOOL,
    "expand_sub_rows": _BOOL,
    "manual_expanded_key": _OPTIONAL_STR,
    "auto_reset_sort_by": _BOOL,
    "auto_reset_expanded": _BOOL,
}


def load_table(path: str) -> dict[str, Any]:
    """Read a table document and return its sections with normalized keys.

    The result always holds columns, rows, options and initial_state (empty
    when the document omits them) plus "__file__" for error locations.
    camelCase keys (initialState, sortBy) are folded to snake_case. Top-level
    keys outside those sections are a ConfigurationError.
    """

    p = Path(path)
    data = _normalize_keys(_read_document(p))
    if not isinstance(data, dict):
        raise TableLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    unknown = sorted(str(k) for k in set(data) - set(DOCUMENT_KEYS))
    if unknown:
        raise ConfigurationError(
            code="E_UNKNOWN_KEY",
            message=f"unknown top-level keys: {', '.join(unknown)}",
            file=str(p),
        )

    doc: dict[str, Any] = {key: data.get(key) for key in DOCUMENT_KEYS}
    for key in ("columns", "rows"):
        if doc[key] is None:
            doc[key] = []
    for key in ("options", "initial_state"):
        if doc[key] is None:
            doc[key] = {}
    doc["__file__"] = str(p)
    return doc


def _read_document(p: Path) -> Any:
    if not p.exists():
        raise TableLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    parser = _PARSERS.get(p.suffix.lower())
    if parser is None:
        raise TableLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message=f"supported formats are {', '.join(sorted(_PARSERS))}",
            file=str(p),
        )
    parse_code, parse = parser

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:  # pragma: no cover
        raise TableLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        return parse(raw_text)
    except (yaml.YAMLError, ValueError) as e:
        raise TableLoadError(code=parse_code, message=str(e), file=str(p)) from e


def _normalize_keys(data: Any) -> Any:
    # Only the document root and initial_state carry aliased keys.
    if not isinstance(data, dict):
        return data
    out = {KEY_ALIASES.get(k, k): v for k, v in data.items()}
    state = out.get("initial_state")
    if isinstance(state, dict):
        out["initial_state"] = {KEY_ALIASES.get(k, k): v for k, v in state.items()}
    return out


def _check_values(raw: dict[str, Any], checks: dict[str, Any], *, file: Optional[str], where: str) -> None:
    for name, value in raw.items():
        check = checks.get(name)
        if check is None:
            continue
        accepts, expected = check
        if not accepts(value):
            raise TableLoadError(
                code="E_INVALID_FIELD",
                message=f"{name} must be {expected}",
                file=file,
                path=f"{where}.{name}",
            )


def build_columns(raw: Any, *, file: Optional[str] = None) -> list[Column]:
    if not isinstance(raw, list):
        raise TableLoadError(code="E_INVALID_FIELD", message="columns must be a list", file=file, path="columns")

    columns: list[Column] = []
    for i, item in enumerate(raw):
        path = f"columns[{i}]"
        if isinstance(item, str):
            item = {"id": item}
        if not isinstance(item, dict):
            raise TableLoadError(code="E_INVALID_FIELD", message="column must be an object", file=file, path=path)
        cid = item.get("id")
        if not isinstance(cid, str) or not cid.strip():
            raise TableLoadError(
                code="E_INVALID_FIELD",
                message="id is required and must be a non-empty string",
                file=file,
                path=f"{path}.id",
            )
        unknown = sorted(set(item) - COLUMN_FIELDS)
        if unknown:
            raise ConfigurationError(
                code="E_UNKNOWN_COLUMN_FIELD",
                message=f"unknown column fields: {', '.join(unknown)}",
                file=file,
                path=path,
            )
        sort_type = item.get("sort_type", "alphanumeric")
        if not isinstance(sort_type, str):
            raise TableLoadError(
                code="E_INVALID_FIELD", message="sort_type must be a string", file=file, path=f"{path}.sort_type"
            )
        _check_values(item, COLUMN_VALUE_CHECKS, file=file, where=path)
        columns.append(Column(**item))
    return columns


def build_rows(records: Any, *, file: Optional[str] = None) -> list[Row]:
    """Build a row tree from nested records, assigning path ids, sibling indexes and depth."""

    if not isinstance(records, list):
        raise TableLoadError(code="E_INVALID_FIELD", message="rows must be a list", file=file, path="rows")

    def _build(level: list[Any], parent: Optional[RowPath], where: str) -> tuple[Row, ...]:
        out: list[Row] = []
        for i, record in enumerate(level):
            path = f"{where}[{i}]"
            if not isinstance(record, dict):
                raise TableLoadError(code="E_INVALID_FIELD", message="row must be an object", file=file, path=path)
            row_path = parent.child(i) if parent is not None else RowPath((i,))

            sub_records: Any = []
            for key in SUB_ROW_KEYS:
                if key in record:
                    sub_records = record[key]
                    break
            if not isinstance(sub_records, list):
                raise TableLoadError(
                    code="E_INVALID_FIELD", message="subRows must be a list", file=file, path=f"{path}.subRows"
                )

            values = {k: v for k, v in record.items() if k not in SUB_ROW_KEYS}
            out.append(
                Row(
                    id=str(row_path),
                    index=i,
                    depth=row_path.depth - 1,
                    values=values,
                    original=record,
                    sub_rows=_build(sub_records, row_path, f"{path}.subRows"),
                )
            )
        return tuple(out)

    return list(_build(records, None, "rows"))


def build_options(raw_options: Any, raw_state: Any = None, *, file: Optional[str] = None) -> TableOptions:
    if not isinstance(raw_options, dict):
        raise TableLoadError(code="E_INVALID_FIELD", message="options must be a mapping", file=file, path="options")

    unknown = sorted(set(raw_options) - OPTION_FIELDS)
    if unknown:
        raise ConfigurationError(
            code="E_UNKNOWN_OPTION",
            message=f"unknown options: {', '.join(unknown)}",
            file=file,
            path="options",
        )
    _check_values(raw_options, OPTION_VALUE_CHECKS, file=file, where="options")

    return TableOptions(**raw_options, initial_state=build_state(raw_state or {}, file=file))


def build_state(raw: Any, *, file: Optional[str] = None) -> TableState:
    if not isinstance(raw, dict):
        raise TableLoadError(
            code="E_INVALID_FIELD", message="initial_state must be a mapping", file=file, path="initial_state"
        )

    sort_by_raw = raw.get("sort_by") or []
    expanded_raw = raw.get("expanded") or []
    if not isinstance(sort_by_raw, list):
        raise TableLoadError(
            code="E_INVALID_FIELD", message="sort_by must be a list", file=file, path="initial_state.sort_by"
        )
    if not isinstance(expanded_raw, list) or any(not isinstance(x, str) for x in expanded_raw):
        raise TableLoadError(
            code="E_INVALID_FIELD",
            message="expanded must be a list of row ids",
            file=file,
            path="initial_state.expanded",
        )

    sort_by: list[SortDescriptor] = []
    seen: set[str] = set()
    for i, item in enumerate(sort_by_raw):
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise TableLoadError(
                code="E_INVALID_FIELD",
                message="sort_by items must be {id, desc}",
                file=file,
                path=f"initial_state.sort_by[{i}]",
            )
        if item["id"] in seen:
            raise ConfigurationError(
                code="E_DUPLICATE_SORT_COLUMN",
                message=f"duplicate sort column: {item['id']}",
                file=file,
                path=f"initial_state.sort_by[{i}]",
            )
        _check_values(item, {"desc": _BOOL}, file=file, where=f"initial_state.sort_by[{i}]")
        seen.add(item["id"])
        sort_by.append(SortDescriptor(id=item["id"], desc=item.get("desc", False)))

    return TableState(sort_by=tuple(sort_by), expanded=frozenset(expanded_raw))


def build_table(doc: dict[str, Any]) -> Table:
    file = doc.get("__file__")
    return Table(
        columns=build_columns(doc.get("columns"), file=file),
        rows=build_rows(doc.get("rows"), file=file),
        options=build_options(doc.get("options"), doc.get("initial_state"), file=file),
    )
