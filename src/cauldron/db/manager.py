"""Database manager: the single entry point to the cauldron store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Union

from ..console import report_error, report_success
from .cache import MetadataCache, TableSnapshot, quote_identifier
from .connection import ConnectionManager, RunResult
from .errors import (
    CauldronError,
    ExecutionError,
    Result,
    SchemaExecutionError,
    SerializationError,
    TableExistsError,
)
from .schema import DEFAULT_REGISTRY, SchemaRegistry
from .sync import SchemaSynchronizer


def _check_keys(value: Any) -> None:
    """Reject mapping keys json.dumps would silently coerce to strings."""
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Keys must be str, not {type(key).__name__}")
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


class DatabaseManager:
    """Owns the store connection and the metadata cache built from it.

    Every public operation returns a Result instead of raising; failures are
    also reported on the diagnostic console.

    Usage:
        manager = DatabaseManager.init(Path("cauldron.db"), debug=True).unwrap()
        manager.refresh_table_schema()
        print(manager.to_string())
        manager.close()
    """

    def __init__(
        self,
        connection: ConnectionManager,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ):
        self.connection = connection
        self.registry = registry
        self.cache = MetadataCache()

    @property
    def debug(self) -> bool:
        return self.connection.debug

    @property
    def tables(self) -> Mapping[str, TableSnapshot]:
        """The cache as of the last reload."""
        return self.cache.tables

    @classmethod
    def init(
        cls,
        path: Union[str, Path],
        debug: bool = False,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ) -> Result[DatabaseManager]:
        """Open the store and load the metadata cache once.

        Args:
            path: Path to the SQLite file, or ":memory:"
            debug: Trace statements and report each step
            registry: Tables, views and seeds applied by refresh_table_schema
        """
        try:
            connection = ConnectionManager.open(path, debug=debug)
        except CauldronError as e:
            return cls._failed(e)

        manager = cls(connection, registry)
        loaded = manager.load_table_metadata()
        if not loaded.ok:
            manager.close()
            return Result.failure(loaded.error)
        return Result.success(manager)

    def load_table_metadata(self) -> Result[Mapping[str, TableSnapshot]]:
        """Reload every table's schema and rows from the catalog.

        On failure the previous cache stays installed.
        """
        try:
            tables = self.cache.reload(self.connection)
        except CauldronError as e:
            return self._failed(e)
        report_success("Table metadata and data loaded", self.debug)
        return Result.success(tables)

    def refresh_table_schema(self) -> Result[Mapping[str, TableSnapshot]]:
        """Apply every registered table/view and seed row, then reload.

        Safe to retry after a failure: every statement is idempotent.
        """
        try:
            SchemaSynchronizer(self.connection, self.registry).apply()
        except CauldronError as e:
            return self._failed(e)
        return self.load_table_metadata()

    def create_table(self, table: str, schema: str) -> Result[TableSnapshot]:
        """Create a table with an implicit integer `id` primary key.

        Args:
            table: New table name
            schema: Column definitions placed after the id column,
                e.g. "label TEXT, weight REAL"

        The existence check uses the cache, not the live catalog. A table
        created outside this manager since the last reload passes the check;
        the statement is create-if-absent so it will not fail, but the table
        returned may then already hold rows.
        """
        existing = self.cache.lookup(table)
        if existing is not None:
            return self._failed(TableExistsError(f"Table {existing} already exists"))

        sql = f"""
        CREATE TABLE IF NOT EXISTS {quote_identifier(table)} (
        id INTEGER PRIMARY KEY,
        {schema}
      )"""
        try:
            self.connection.execute(sql)
        except ExecutionError as e:
            return self._failed(SchemaExecutionError(f"Failed to create {table}: {e}"))
        report_success(f"Table {table} created", self.debug)

        loaded = self.load_table_metadata()
        if not loaded.ok:
            return Result.failure(loaded.error)
        snapshot = loaded.value.get(self.cache.lookup(table))
        if snapshot is None:
            # Never report success without a snapshot
            return self._failed(SchemaExecutionError(f"Table {table} missing after create"))
        return Result.success(snapshot)

    def insert_json(self, table: str, field: str, json_value: Any) -> Result[RunResult]:
        """Insert one row holding `json_value` serialized as JSON text.

        The table and column are not checked against the cache; the store
        rejects unknown names. The cache is not reloaded.
        """
        try:
            _check_keys(json_value)
            payload = json.dumps(json_value, allow_nan=False)
        except (TypeError, ValueError, RecursionError) as e:
            return self._failed(SerializationError(str(e)))

        sql = f"INSERT INTO {quote_identifier(table)} ({quote_identifier(field)}) VALUES (?)"
        try:
            return Result.success(self.connection.run(sql, (payload,)))
        except CauldronError as e:
            return self._failed(e)

    def to_string(self, pretty: bool = True) -> str:
        return self.cache.to_string(pretty)

    def close(self) -> Result[None]:
        """Close the connection. A second call is a no-op."""
        try:
            self.connection.close()
        except CauldronError as e:
            return self._failed(e)
        return Result.success()

    @staticmethod
    def _failed(error: CauldronError) -> Result:
        report_error("DB", error)
        return Result.failure(error)

    def __str__(self) -> str:
        return self.to_string()
