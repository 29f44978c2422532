"""Pytest configuration and shared fixtures for the schema builder.

This module provides:
- Recording callbacks for checking deferred invocation
- Sample schemas used across unit and integration tests
- DuckDB connection fixtures for integration testing
- Pytest configuration and markers
"""

import os

# Select the testing configuration before schema_builder.config is imported
os.environ.setdefault("SCHEMA_BUILDER_ENVIRONMENT", "testing")

from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio

from schema_builder.domain.schema import Schema
from schema_builder.domain.table import Table
from schema_builder.infrastructure.duckdb.config import DuckDBConfig
from schema_builder.infrastructure.duckdb.connection import MEMORY_DATABASE, DuckDBConnection
from schema_builder.infrastructure.duckdb.schema_applier import DuckDBSchemaApplier


class RecordingCallback:
    """Callback that appends fixed fragments and records every invocation."""

    def __init__(self, *fragments: str):
        self.fragments = fragments
        self.calls: list[Table] = []

    def __call__(self, table: Table) -> None:
        self.calls.append(table)
        for fragment in self.fragments:
            table.items.append(fragment)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recording_callback() -> Callable[..., RecordingCallback]:
    """Factory for callbacks that record their invocations."""
    return RecordingCallback


@pytest.fixture
def users_schema() -> Schema:
    """Namespaced schema with a users and a posts table."""

    def users(table: Table) -> None:
        table.integer("id", primary=True)
        table.string("email", nullable=False, unique=True)
        table.boolean("active", default=True)
        table.timestamps()

    def posts(table: Table) -> None:
        table.integer("id", primary=True)
        table.integer("user_id", nullable=False)
        table.text("body")
        table.foreign("user_id", references="app.users.id")

    return (
        Schema.with_namespace("app")
        .create_table("users", users)
        .create_table("posts", posts)
    )


@pytest.fixture
def duckdb_config() -> DuckDBConfig:
    return DuckDBConfig(memory_limit="256MB", threads=1)


@pytest_asyncio.fixture
async def duckdb_connection(duckdb_config: DuckDBConfig) -> AsyncGenerator[DuckDBConnection, None]:
    """Connected in-memory DuckDB connection."""
    connection = DuckDBConnection(MEMORY_DATABASE, duckdb_config)
    await connection.open()

    yield connection

    await connection.close()


@pytest.fixture
def schema_applier(duckdb_connection: DuckDBConnection) -> DuckDBSchemaApplier:
    return DuckDBSchemaApplier(duckdb_connection)


def pytest_collection_modifyitems(config, items):
    """Mark tests based on their location."""
    for item in items:
        if "/integration/" in item.nodeid:
            item.add_marker(pytest.mark.integration)
