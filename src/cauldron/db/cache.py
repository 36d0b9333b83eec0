"""In-memory mirror of the store's catalog and table contents."""

from __future__ import annotations

import json
import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .connection import ConnectionManager

CATALOG_QUERY = """
    SELECT name, sql FROM sqlite_master
    WHERE type IN ('table', 'view') AND name NOT LIKE 'sqlite_%'
    ORDER BY rowid
"""

# SQLite matches identifiers case-insensitively, folding ASCII letters only
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


@dataclass(frozen=True)
class TableSnapshot:
    """A table's catalog SQL and every row it held at reload time."""

    schema: str
    data: tuple[Mapping[str, Any], ...] = ()

    def to_dict(self) -> dict:
        return {"schema": self.schema, "data": [dict(row) for row in self.data]}


def quote_identifier(name: str) -> str:
    """Quote a table or column name for interpolation into SQL."""
    return '"' + name.replace('"', '""') + '"'


def fold_identifier(name: str) -> str:
    """Normalize a name the way SQLite compares identifiers."""
    return name.translate(_ASCII_LOWER)


def _encode_value(value: Any) -> Any:
    # BLOB columns
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class MetadataCache:
    """Read-only mapping of table name to TableSnapshot.

    A reload builds a new mapping and swaps it in whole. The previous mapping
    is never mutated, so a reference taken by a reader stays consistent. If
    any read fails the previous mapping is kept.

    The cache is only as fresh as the last reload: writes made through
    insert_json or directly against the file are not visible until then.
    Per-table reads are not one snapshot either, so a writer running during a
    reload can leave tables reflecting different moments.
    """

    def __init__(self, tables: Optional[Mapping[str, TableSnapshot]] = None):
        self._tables: Mapping[str, TableSnapshot] = MappingProxyType(dict(tables or {}))

    @property
    def tables(self) -> Mapping[str, TableSnapshot]:
        return self._tables

    def reload(self, connection: ConnectionManager) -> Mapping[str, TableSnapshot]:
        """Rebuild the cache from the catalog.

        Returns:
            The newly installed mapping

        Raises:
            QueryError: The catalog or a table could not be read
        """
        tables: dict[str, TableSnapshot] = {}
        for entry in connection.query_all(CATALOG_QUERY):
            name = entry["name"]
            rows = connection.query_all(f"SELECT * FROM {quote_identifier(name)}")
            # Rows are frozen so a reader holding a snapshot cannot edit it
            data = tuple(MappingProxyType(row) for row in rows)
            tables[name] = TableSnapshot(schema=entry["sql"], data=data)

        self._tables = MappingProxyType(tables)
        return self._tables

    def get(self, name: str) -> Optional[TableSnapshot]:
        return self._tables.get(name)

    def lookup(self, name: str) -> Optional[str]:
        """Return the cached key SQLite would resolve `name` to, if any."""
        folded = fold_identifier(name)
        for key in self._tables:
            if fold_identifier(key) == folded:
                return key
        return None

    def to_dict(self) -> dict[str, dict]:
        return {name: snapshot.to_dict() for name, snapshot in self._tables.items()}

    def to_string(self, pretty: bool = True) -> str:
        """Dump every table as {name: {schema, data}} JSON."""
        return json.dumps(
            self.to_dict(),
            indent=2 if pretty else None,
            default=_encode_value,
            ensure_ascii=False,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self):
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)
