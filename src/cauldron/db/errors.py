"""Error taxonomy and result type for the cauldron store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CauldronError(Exception):
    """Base class for every failure raised by the store."""


class ConnectionError(CauldronError):
    """Opening or closing the database handle failed."""


class SchemaExecutionError(CauldronError):
    """A DDL or seed statement failed to apply."""


class TableExistsError(SchemaExecutionError):
    """The table is already known to the metadata cache."""


class QueryError(CauldronError):
    """Reading the catalog or a table's rows failed."""


class ExecutionError(CauldronError):
    """A statement against a table (insert, prepare, run) failed."""


class SerializationError(CauldronError):
    """A value could not be encoded as JSON."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a manager operation: either a value or a typed error.

    Usage:
        result = manager.refresh_table_schema()
        if result.ok:
            tables = result.value
        else:
            print(result.error)
    """

    value: Optional[T] = None
    error: Optional[CauldronError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CauldronError) -> "Result[T]":
        return cls(error=error)
