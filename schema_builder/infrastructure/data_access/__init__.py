"""Database-agnostic data access errors."""

from .exceptions import (
    ConnectionError,
    DataAccessError,
    SchemaApplyError,
    TransactionError,
)

__all__ = [
    "DataAccessError",
    "ConnectionError",
    "TransactionError",
    "SchemaApplyError",
]
