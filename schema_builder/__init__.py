"""Declarative, deferred builder for SQL ``create table`` statements."""

from schema_builder.domain import (
    InvalidOperationError,
    Job,
    MissingNamespaceError,
    Raw,
    Schema,
    SchemaAlreadyRenderedError,
    SchemaBuilderError,
    SchemaDefinitionError,
    SchemaRenderError,
    SchemaState,
    StatementKind,
    Table,
    TableMode,
)

__version__ = "0.1.0"

__all__ = [
    "Schema",
    "SchemaState",
    "Job",
    "StatementKind",
    "Table",
    "TableMode",
    "Raw",
    "SchemaBuilderError",
    "SchemaDefinitionError",
    "MissingNamespaceError",
    "SchemaAlreadyRenderedError",
    "SchemaRenderError",
    "InvalidOperationError",
]
