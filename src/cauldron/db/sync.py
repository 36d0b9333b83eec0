"""Apply the schema registry to the store."""

from ..console import report_success
from .connection import ConnectionManager
from .errors import ExecutionError, SchemaExecutionError
from .schema import SchemaRegistry


class SchemaSynchronizer:
    """Creates every registered table/view and upserts the seed rows.

    All DDL is create-if-absent and every seed is an upsert keyed on id, so
    applying the registry any number of times converges on the same state.
    Seeded rows are overwritten even if edited outside the registry.
    """

    def __init__(self, connection: ConnectionManager, registry: SchemaRegistry):
        self.connection = connection
        self.registry = registry

    def apply(self) -> None:
        """Run every DDL statement then every seed, in registry order.

        Statements run one by one in autocommit mode. The first failure stops
        the run; statements before it stay applied.

        Raises:
            SchemaExecutionError: A statement failed
        """
        debug = self.connection.debug

        for entry in self.registry:
            try:
                self.connection.execute(entry.ddl)
            except ExecutionError as e:
                raise SchemaExecutionError(f"Failed to apply {entry.name} schema: {e}") from e
            report_success(f"Updated {entry.name} schema", debug)

        for index, seed in enumerate(self.registry.seeds):
            try:
                self.connection.execute(seed)
            except ExecutionError as e:
                raise SchemaExecutionError(f"Failed to apply seed #{index + 1}: {e}") from e
            report_success(f"Applied seed #{index + 1}", debug)
