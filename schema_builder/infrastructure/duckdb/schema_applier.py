"""Apply rendered schemas to a DuckDB database."""

import logging
import time
from dataclasses import dataclass

import duckdb

from schema_builder.domain.schema import Schema
from schema_builder.domain.table import quote_identifier
from schema_builder.infrastructure.data_access.exceptions import (
    ConnectionError,
    SchemaApplyError,
    TransactionError,
)
from .connection import DuckDBConnection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of applying a schema."""

    statements: tuple[str, ...]
    executed_count: int
    execution_time_ms: float


class DuckDBSchemaApplier:
    """Executes the statements of a rendered schema on a DuckDB connection.

    All statements run inside a single transaction, so a failing statement
    leaves the database as it was before ``apply`` was called.

    Statements are executed exactly as rendered, in the PostgreSQL flavour
    the column helpers produce. DuckDB has no ``serial``/``bigserial`` (what
    ``increments`` and ``big_increments`` render) and no ``jsonb``, so those
    fail with ``SchemaApplyError``; use ``integer(..., primary=True)`` and
    ``json`` in schemas meant for DuckDB.
    """

    def __init__(self, connection: DuckDBConnection):
        self.connection = connection

    async def apply(self, schema: Schema, create_namespace: bool = True) -> ApplyResult:
        """Render ``schema`` and execute its statements in order.

        Args:
            schema: Schema to render; rendering happens here if it has not
                happened yet
            create_namespace: Issue ``create schema if not exists`` for the
                schema's namespace before the table statements

        Returns:
            ApplyResult with the executed statements and timing

        Raises:
            ConnectionError: If the connection is not open
            SchemaApplyError: If any statement fails; the transaction is
                rolled back
        """
        if not self.connection.is_open:
            raise ConnectionError("DuckDB connection is not open")

        statements = schema.statements()
        if create_namespace and schema.namespace is not None and statements:
            statements.insert(
                0, f"create schema if not exists {quote_identifier(schema.namespace)}"
            )

        start_time = time.perf_counter()
        executed = 0
        try:
            async with self.connection.transaction():
                for statement in statements:
                    logger.debug(f"Executing: {statement}")
                    await self.connection.execute(statement)
                    executed += 1
        except (duckdb.Error, TransactionError) as e:
            logger.error(f"Schema apply failed after {executed} statement(s): {str(e)}")
            raise SchemaApplyError(
                f"Failed to apply statement {executed + 1} of {len(statements)}: {str(e)}"
            ) from e

        execution_time = (time.perf_counter() - start_time) * 1000
        logger.info(f"Applied {executed} statement(s) in {execution_time:.2f}ms")
        return ApplyResult(
            statements=tuple(statements),
            executed_count=executed,
            execution_time_ms=execution_time,
        )

    async def table_exists(self, name: str, namespace: str | None = None) -> bool:
        """Check whether a table exists, optionally within a namespace."""
        sql = "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = ?"
        parameters = [name]
        if namespace is not None:
            sql += " AND table_schema = ?"
            parameters.append(namespace)

        rows = await self.connection.fetch_all(sql, parameters)
        return rows[0][0] > 0
