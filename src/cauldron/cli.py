"""Main CLI for Cauldron."""

import json
from pathlib import Path
from typing import Mapping, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import resolve_config
from .console import console as err_console
from .db import DatabaseManager, TableSnapshot

app = typer.Typer(
    name="cauldron",
    help="Cauldron - keep the local store's schema and seed rows up to date",
)
console = Console()

DatabaseOption = typer.Option(None, "--database", "-d", help="Path to the SQLite store")
DebugOption = typer.Option(None, "--debug/--no-debug", help="Trace SQL and report each step")


def open_manager(database: Optional[Path], debug: Optional[bool]) -> DatabaseManager:
    """Open the configured store or exit with error."""
    config = resolve_config(database, debug)
    result = DatabaseManager.init(config.database_path, debug=config.debug)
    if not result.ok:
        err_console.print(f"[red]Error:[/red] Could not open {config.database_path}")
        raise typer.Exit(1)
    return result.value


def render_tables(tables: Mapping[str, TableSnapshot]) -> Table:
    """Summarize cached tables as a rich table."""
    table = Table(title="Tables")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Rows", justify="right")
    for name, snapshot in tables.items():
        kind = "view" if (snapshot.schema or "").lstrip().upper().startswith("CREATE VIEW") else "table"
        table.add_row(name, kind, str(len(snapshot.data)))
    return table


@app.command("refresh")
def refresh(
    database: Optional[Path] = DatabaseOption,
    debug: Optional[bool] = DebugOption,
):
    """Create missing tables/views, upsert seed rows, and show the result."""
    manager = open_manager(database, debug)
    try:
        result = manager.refresh_table_schema()
        if not result.ok:
            raise typer.Exit(1)
        console.print(render_tables(result.value))
    finally:
        manager.close()


@app.command("info")
def info(
    database: Optional[Path] = DatabaseOption,
    debug: Optional[bool] = DebugOption,
):
    """Show the tables currently in the store without changing anything."""
    manager = open_manager(database, debug)
    try:
        console.print(render_tables(manager.tables))
    finally:
        manager.close()


@app.command("dump")
def dump(
    database: Optional[Path] = DatabaseOption,
    debug: Optional[bool] = DebugOption,
    compact: bool = typer.Option(False, "--compact", help="Single-line JSON"),
):
    """Print every table's schema and rows as JSON."""
    manager = open_manager(database, debug)
    try:
        typer.echo(manager.to_string(pretty=not compact))
    finally:
        manager.close()


@app.command("create-table")
def create_table(
    table: str = typer.Argument(..., help="Table name"),
    columns: str = typer.Argument(..., help='Column definitions, e.g. "label TEXT"'),
    database: Optional[Path] = DatabaseOption,
    debug: Optional[bool] = DebugOption,
):
    """Create a table with an integer id primary key plus COLUMNS."""
    manager = open_manager(database, debug)
    try:
        result = manager.create_table(table, columns)
        if not result.ok:
            raise typer.Exit(1)
        console.print(f"[green]Created:[/green] {escape(table)}")
        console.print(f"[dim]{escape(result.value.schema.strip())}[/dim]")
    finally:
        manager.close()


@app.command("insert-json")
def insert_json(
    table: str = typer.Argument(..., help="Target table"),
    field: str = typer.Argument(..., help="Target column"),
    value: str = typer.Argument(..., help="JSON document to store"),
    database: Optional[Path] = DatabaseOption,
    debug: Optional[bool] = DebugOption,
):
    """Store a JSON document in a single column of a new row."""
    try:
        document = json.loads(value)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Error:[/red] Invalid JSON: {e}")
        raise typer.Exit(1)

    manager = open_manager(database, debug)
    try:
        result = manager.insert_json(table, field, document)
        if not result.ok:
            raise typer.Exit(1)
        console.print(f"[green]Inserted:[/green] row {result.value.last_row_id} into {escape(table)}")
    finally:
        manager.close()


def main():
    app()


if __name__ == "__main__":
    main()
