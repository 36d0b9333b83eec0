"""Diagnostic output shared by the store and the CLI."""

from rich.console import Console
from rich.markup import escape

# Diagnostics go to stderr so `cauldron dump` output stays clean on stdout
console = Console(stderr=True)


def report_success(message: str, debug: bool = True) -> None:
    """Print a success line, only when debug output is enabled."""
    if debug:
        console.print(f"[green]✓[/green] {escape(message)}")


def report_info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]")


def report_error(context: str, error: BaseException) -> None:
    """Print an error line with its context tag."""
    console.print(f"[red]Error:[/red] {escape(f'[{context}]')} {escape(str(error))}")


def report_sql(sql: str) -> None:
    console.print(f"[cyan]SQL Executed:[/cyan] {escape(sql.strip())}")


def report_failed_sql(error: BaseException, sql: str) -> None:
    """Print the statement behind a failure; the error itself is reported by the caller."""
    console.print(f"[yellow]Failed SQL:[/yellow] {escape(sql.strip())}")
