"""Connection management for the cauldron store."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..console import report_failed_sql, report_info, report_sql
from .errors import ConnectionError, ExecutionError, QueryError

ErrorListener = Callable[[sqlite3.Error, str], None]
TraceListener = Callable[[str], None]

MEMORY_PATH = ":memory:"


@dataclass(frozen=True)
class RunResult:
    """Outcome of a prepared statement run."""

    last_row_id: Optional[int]
    changes: int


class ConnectionManager:
    """Holds the single SQLite handle used by the store.

    The connection runs in autocommit mode: every statement commits on its
    own and nothing here wraps a sequence in a transaction.

    Usage:
        conn = ConnectionManager.open(Path("cauldron.db"), debug=True)
        conn.execute("CREATE TABLE IF NOT EXISTS t (x TEXT)")
        rows = conn.query_all("SELECT * FROM t")
        conn.close()
    """

    def __init__(self, connection: sqlite3.Connection, path: str, debug: bool = False):
        self.path = path
        self.debug = debug
        self._connection: Optional[sqlite3.Connection] = connection
        self._error_listeners: list[ErrorListener] = []
        self._trace_listeners: list[TraceListener] = []

        if debug:
            self._error_listeners.append(report_failed_sql)
            self._trace_listeners.append(report_sql)
            connection.set_trace_callback(self._trace)

    @classmethod
    def open(cls, path: Union[str, Path], debug: bool = False) -> "ConnectionManager":
        """Open the database file, creating its directory if needed.

        Args:
            path: Path to the SQLite file, or ":memory:"
            debug: Trace every executed statement

        Raises:
            ConnectionError: The file could not be opened
        """
        target = str(path)
        try:
            if target != MEMORY_PATH:
                Path(target).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(target, isolation_level=None)
        except (OSError, sqlite3.Error) as e:
            raise ConnectionError(f"Cannot open database {target}: {e}") from e

        connection.row_factory = sqlite3.Row
        try:
            # Forces the file open; sqlite defers it until the first statement
            connection.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            connection.close()
            raise ConnectionError(f"Cannot open database {target}: {e}") from e

        return cls(connection, target, debug=debug)

    @property
    def closed(self) -> bool:
        return self._connection is None

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Register a callback fired with (error, sql) when a statement fails."""
        self._error_listeners.append(listener)

    def add_trace_listener(self, listener: TraceListener) -> None:
        """Register a callback fired with each executed statement.

        Tracing is only wired into the driver in debug mode.
        """
        self._trace_listeners.append(listener)

    def execute(self, sql: str) -> None:
        """Execute a single statement with no result rows.

        Raises:
            ExecutionError: The engine rejected the statement
        """
        try:
            self._handle().execute(sql)
        except sqlite3.Error as e:
            self._notify(e, sql)
            raise ExecutionError(str(e)) from e

    def query_all(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Run a query and return every row as a dict keyed by column name.

        Raises:
            QueryError: The query failed
        """
        try:
            rows = self._handle().execute(sql, params).fetchall()
        except sqlite3.Error as e:
            self._notify(e, sql)
            raise QueryError(str(e)) from e
        return [dict(row) for row in rows]

    def run(self, sql: str, params: tuple = ()) -> RunResult:
        """Prepare a statement, bind params, and run it.

        Returns:
            RunResult with the last inserted row id and the change count

        Raises:
            ExecutionError: Preparing, binding or running failed
        """
        try:
            cursor = self._handle().execute(sql, params)
        except sqlite3.Error as e:
            self._notify(e, sql)
            raise ExecutionError(str(e)) from e
        return RunResult(last_row_id=cursor.lastrowid, changes=cursor.rowcount)

    def close(self) -> None:
        """Close the handle. Closing an already closed handle is a no-op.

        Raises:
            ConnectionError: The driver failed to close the handle
        """
        if self._connection is None:
            report_info(f"Database {self.path} already closed")
            return

        connection, self._connection = self._connection, None
        try:
            connection.close()
        except sqlite3.Error as e:
            raise ConnectionError(f"Cannot close database {self.path}: {e}") from e
        report_info("Database closed")

    def _handle(self) -> sqlite3.Connection:
        if self._connection is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        return self._connection

    def _trace(self, sql: str) -> None:
        for listener in self._trace_listeners:
            listener(sql)

    def _notify(self, error: sqlite3.Error, sql: str) -> None:
        for listener in self._error_listeners:
            listener(error, sql)
