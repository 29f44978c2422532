"""Async DuckDB connection used to apply schemas."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Sequence

import duckdb

from schema_builder.infrastructure.data_access.exceptions import (
    ConnectionError,
    TransactionError,
)
from .config import DuckDBConfig

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class DuckDBConnection:
    """A single DuckDB connection with statement execution and transactions.

    Usage:
        async with DuckDBConnection("schemas.duckdb") as connection:
            async with connection.transaction():
                await connection.execute('create schema "app"')

    DuckDB has no savepoints: a ``transaction()`` opened inside another one
    joins it, and only the outermost block commits or rolls back.
    """

    def __init__(self, database_path: str = MEMORY_DATABASE, config: Optional[DuckDBConfig] = None):
        self.database_path = database_path
        self.config = config or DuckDBConfig.from_environment()
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._transaction_depth = 0

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"DuckDBConnection({self.database_path!r}, {state})"

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    async def open(self) -> "DuckDBConnection":
        """Open the database, creating the parent directory of a file database.

        Opening an already open connection does nothing.

        Raises:
            ConnectionError: If the directory or the database cannot be opened
        """
        if self._conn is not None:
            return self

        try:
            if self.database_path != MEMORY_DATABASE:
                Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
            conn = duckdb.connect(database=self.database_path, read_only=self.config.read_only)
        except (duckdb.Error, OSError) as e:
            logger.error(f"Cannot open DuckDB database {self.database_path}: {e}")
            raise ConnectionError(f"Cannot open DuckDB database {self.database_path}: {e}") from e

        for setting in self.config.get_connection_settings():
            try:
                conn.execute(setting)
            except duckdb.Error as e:
                logger.warning(f"Ignoring DuckDB setting {setting!r}: {e}")

        self._conn = conn
        logger.info(f"Opened DuckDB database {self.database_path} with {self.config}")
        return self

    async def close(self) -> None:
        """Close the database; closing a closed connection does nothing."""
        if self._conn is None:
            return

        conn, self._conn = self._conn, None
        self._transaction_depth = 0
        conn.close()
        logger.info(f"Closed DuckDB database {self.database_path}")

    async def execute(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> None:
        """Run a statement that returns no rows (DDL, SET, ...)."""
        self._run(sql, parameters)

    async def fetch_all(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> list[tuple]:
        return self._run(sql, parameters).fetchall()

    def _run(self, sql: str, parameters: Optional[Sequence[Any]]) -> duckdb.DuckDBPyConnection:
        conn = self._require_open()
        if parameters is None:
            return conn.execute(sql)
        return conn.execute(sql, parameters)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["DuckDBConnection"]:
        """Commit on success, roll back when the block raises.

        Raises:
            ConnectionError: If the connection is not open
            TransactionError: If BEGIN or COMMIT fails
        """
        conn = self._require_open()

        if self._transaction_depth:
            self._transaction_depth += 1
            try:
                yield self
            finally:
                self._transaction_depth -= 1
            return

        try:
            conn.execute("BEGIN TRANSACTION")
        except duckdb.Error as e:
            raise TransactionError(f"Failed to begin transaction: {e}") from e
        self._transaction_depth = 1

        try:
            yield self
        except BaseException:
            self._rollback(conn)
            raise
        else:
            try:
                conn.execute("COMMIT")
            except duckdb.Error as e:
                self._rollback(conn)
                raise TransactionError(f"Failed to commit transaction: {e}") from e
            logger.debug("Transaction committed")
        finally:
            self._transaction_depth = 0

    def _rollback(self, conn: duckdb.DuckDBPyConnection) -> None:
        try:
            conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
        except duckdb.Error as e:
            logger.error(f"Rollback failed: {e}")

    def _require_open(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise ConnectionError("DuckDB connection is not open")
        return self._conn

    async def __aenter__(self) -> "DuckDBConnection":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
