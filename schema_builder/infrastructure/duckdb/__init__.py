"""DuckDB implementation of schema application."""

from .config import DuckDBConfig
from .connection import MEMORY_DATABASE, DuckDBConnection
from .schema_applier import ApplyResult, DuckDBSchemaApplier

__all__ = [
    "DuckDBConfig",
    "DuckDBConnection",
    "DuckDBSchemaApplier",
    "ApplyResult",
    "MEMORY_DATABASE",
]
