from __future__ import annotations

import json
import logging
from typing import Any, Optional

import typer

from table_rows.core.errors import ConfigurationError, TableError, TableLoadError
from table_rows.core.expand.expand_rows import is_row_expanded
from table_rows.core.io.load_table import build_table, load_table
from table_rows.core.model import Row
from table_rows.core.sort.sort_types import BUILTIN_SORT_TYPES
from table_rows.core.table import Table

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log derivation steps to stderr"),
) -> None:
    """Table rows CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return


@app.command("show")
def show(
    path: str = typer.Argument(..., help="Path to a table file (.yaml/.yml/.json)"),
    sort: list[str] = typer.Option(
        [], "--sort", help="Toggle sort on a column; COL, COL:asc or COL:desc. Repeatable."
    ),
    multi: bool = typer.Option(False, "--multi", help="Apply each --sort as a multi-sort toggle"),
    expand: list[str] = typer.Option([], "--expand", help="Expand a row id. Repeatable."),
    expand_all: bool = typer.Option(False, "--expand-all", help="Expand every row"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Print the visible rows after sorting and expansion."""
    if format not in ("text", "json"):
        _print_errors(
            [
                ConfigurationError(
                    code="E_SHOW_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    table = _open_table(path)

    try:
        for spec in sort:
            column_id, desc = _parse_sort(spec)
            table.toggle_sort_by(column_id, desc=desc, multi=multi)
        if expand_all:
            table.toggle_all_rows_expanded(True)
        for row_id in expand:
            table.toggle_row_expanded(row_id, True)
        rows = table.visible_rows
    except ConfigurationError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "json":
        payload = {
            "tool": "table-rows",
            "command": "show",
            "sort_by": [{"id": d.id, "desc": d.desc} for d in table.state.sort_by],
            "expanded_depth": table.expanded_depth,
            "is_all_rows_expanded": table.is_all_rows_expanded,
            "rows": [_row_item(r) for r in rows],
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))
        return

    column_ids = [c.id for c in table.columns]
    for row in rows:
        marker = _expand_marker(row, table)
        cells = " | ".join(_cell(row.values.get(cid)) for cid in column_ids)
        typer.echo(f"{'  ' * row.depth}{marker} {row.id}: {cells}")


@app.command("columns")
def columns(
    path: str = typer.Argument(..., help="Path to a table file (.yaml/.yml/.json)"),
) -> None:
    """List columns with their sort configuration."""
    table = _open_table(path)
    for c in table.columns:
        st = table.column_sort_state(c.id)
        flags: list[str] = []
        if c.sort_desc_first:
            flags.append("desc-first")
        if c.sort_inverted:
            flags.append("inverted")
        if st.is_sorted:
            flags.append(f"sorted#{st.sorted_index}:{'desc' if st.is_sorted_desc else 'asc'}")
        sort_type = c.sort_type if isinstance(c.sort_type, str) else "<function>"
        suffix = f" [{', '.join(flags)}]" if flags else ""
        typer.echo(f"- {c.id}: sort_type={sort_type} can_sort={str(st.can_sort).lower()}{suffix}")


@app.command("sort-types")
def sort_types() -> None:
    """List built-in sort types."""
    typer.echo("Sort types:")
    for name in sorted(BUILTIN_SORT_TYPES):
        typer.echo(f"- {name}")


def _open_table(path: str) -> Table:
    try:
        return build_table(load_table(path))
    except TableLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        _print_errors([e])
        raise typer.Exit(code=2)


def _parse_sort(spec: str) -> tuple[str, Optional[bool]]:
    column_id, sep, direction = spec.partition(":")
    if not sep:
        return column_id, None
    if direction not in ("asc", "desc"):
        raise ConfigurationError(
            code="E_SHOW_BAD_SORT",
            message=f"bad sort direction in {spec!r} (use asc or desc)",
            path="sort",
        )
    return column_id, direction == "desc"


def _expand_marker(row: Row, table: Table) -> str:
    if not row.sub_rows:
        return " "
    expanded = is_row_expanded(row, table.state.expanded, table.options.manual_expanded_key)
    return "-" if expanded else "+"


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def _row_item(row: Row) -> dict[str, Any]:
    return {
        "id": row.id,
        "depth": row.depth,
        "index": row.index,
        "can_expand": row.can_expand,
        "values": dict(row.values),
    }


def _print_errors(errors: list[TableError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.location, e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="table-rows")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
