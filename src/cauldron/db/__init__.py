"""Database module for the cauldron store.

This module keeps a local SQLite file's schema in line with the registered
tables, views and seed rows, and mirrors every table into an in-memory cache.

Usage:
    from cauldron.db import DatabaseManager

    manager = DatabaseManager.init(Path("cauldron.db")).unwrap()
    manager.refresh_table_schema()
    familiars = manager.tables["familiars"].data
"""

from .cache import MetadataCache, TableSnapshot
from .connection import ConnectionManager, RunResult
from .errors import (
    CauldronError,
    ConnectionError,
    ExecutionError,
    QueryError,
    Result,
    SchemaExecutionError,
    SerializationError,
    TableExistsError,
)
from .manager import DatabaseManager
from .schema import DEFAULT_REGISTRY, SchemaEntry, SchemaRegistry
from .sync import SchemaSynchronizer

__all__ = [
    "DatabaseManager",
    "ConnectionManager",
    "RunResult",
    "MetadataCache",
    "TableSnapshot",
    "SchemaSynchronizer",
    "SchemaEntry",
    "SchemaRegistry",
    "DEFAULT_REGISTRY",
    "Result",
    "CauldronError",
    "ConnectionError",
    "SchemaExecutionError",
    "TableExistsError",
    "QueryError",
    "ExecutionError",
    "SerializationError",
]
