"""Domain-specific exceptions for the schema builder."""


class SchemaBuilderError(Exception):
    """Base exception for all schema builder errors."""

    pass


class SchemaDefinitionError(SchemaBuilderError):
    """Raised when a schema definition cannot be built or rendered."""

    pass


class MissingNamespaceError(SchemaDefinitionError):
    """Raised when rendering requires a namespace but none was configured."""

    pass


class SchemaAlreadyRenderedError(SchemaDefinitionError):
    """Raised when a table is registered on a schema that was already rendered."""

    pass


class SchemaRenderError(SchemaDefinitionError):
    """Raised when rendering is attempted after a previous render failed."""

    pass


class InvalidOperationError(SchemaDefinitionError):
    """Raised when a table operation is not valid for the statement being built."""

    pass
