"""Data access layer specific exceptions."""

from schema_builder.domain.exceptions import SchemaBuilderError


class DataAccessError(SchemaBuilderError):
    """Base exception for data access layer errors."""

    pass


class ConnectionError(DataAccessError):
    """Exception raised when database connection fails."""

    pass


class TransactionError(DataAccessError):
    """Exception raised when transaction operations fail."""

    pass


class SchemaApplyError(DataAccessError):
    """Exception raised when rendered statements cannot be applied."""

    pass
