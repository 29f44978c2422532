"""Schema definition domain: the deferred builder and table skeletons."""

from .exceptions import (
    InvalidOperationError,
    MissingNamespaceError,
    SchemaAlreadyRenderedError,
    SchemaBuilderError,
    SchemaDefinitionError,
    SchemaRenderError,
)
from .schema import Job, Schema, SchemaState, StatementKind, TableCallback
from .table import Raw, Table, TableMode, format_default, quote_identifier

__all__ = [
    "Schema",
    "SchemaState",
    "Job",
    "StatementKind",
    "TableCallback",
    "Table",
    "TableMode",
    "Raw",
    "quote_identifier",
    "format_default",
    "SchemaBuilderError",
    "SchemaDefinitionError",
    "MissingNamespaceError",
    "SchemaAlreadyRenderedError",
    "SchemaRenderError",
    "InvalidOperationError",
]
