"""Table skeleton and the column/constraint surface that fills it.

A ``Table`` is handed to the callback registered for it when the owning
schema is rendered. Every column or constraint method renders its DDL
fragment immediately and appends it to ``items``; the schema later joins the
items verbatim, so each fragment carries its own leading separator.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from .exceptions import InvalidOperationError

COLUMN_SEPARATOR = ", "


class TableMode(Enum):
    """Statement a table skeleton is collecting fragments for."""

    CREATE = "create"
    ALTER = "alter"


@dataclass(frozen=True)
class Raw:
    """SQL text that is emitted verbatim, e.g. as a column default."""

    sql: str

    def __str__(self) -> str:
        return self.sql


def quote_identifier(name: str) -> str:
    """Wrap an identifier in double quotes.

    Names are not escaped or validated; callers must not pass untrusted input.
    """
    return f'"{name}"'


def format_default(value: Any) -> str:
    """Render a Python value as a SQL default expression."""
    if isinstance(value, Raw):
        return value.sql
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


class Table:
    """Mutable per-table record of rendered DDL fragments."""

    def __init__(self, name: str, mode: TableMode = TableMode.CREATE):
        self._name = name
        self.mode = mode
        self.items: list[str] = []

    @property
    def name(self) -> str:
        """Table name, fixed at creation."""
        return self._name

    def push(self, fragment: str) -> None:
        """Append a fragment, prefixing the column separator when needed."""
        if self.items:
            fragment = f"{COLUMN_SEPARATOR}{fragment}"
        self.items.append(fragment)

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, mode={self.mode.value}, items={len(self.items)})"

    # Columns

    def increments(self, name: str = "id") -> None:
        """Auto-incrementing integer primary key."""
        self._column(name, "serial", primary=True)

    def big_increments(self, name: str = "id") -> None:
        """Auto-incrementing bigint primary key."""
        self._column(name, "bigserial", primary=True)

    def integer(self, name: str, **modifiers: Any) -> None:
        self._column(name, "integer", **modifiers)

    def big_integer(self, name: str, **modifiers: Any) -> None:
        self._column(name, "bigint", **modifiers)

    def small_integer(self, name: str, **modifiers: Any) -> None:
        self._column(name, "smallint", **modifiers)

    def string(self, name: str, length: int = 255, **modifiers: Any) -> None:
        self._column(name, f"varchar({length})", **modifiers)

    def text(self, name: str, **modifiers: Any) -> None:
        self._column(name, "text", **modifiers)

    def boolean(self, name: str, **modifiers: Any) -> None:
        self._column(name, "boolean", **modifiers)

    def real(self, name: str, **modifiers: Any) -> None:
        self._column(name, "real", **modifiers)

    def float(self, name: str, **modifiers: Any) -> None:
        """Single precision float, rendered as ``real``."""
        self.real(name, **modifiers)

    def double(self, name: str, **modifiers: Any) -> None:
        self._column(name, "double precision", **modifiers)

    def decimal(self, name: str, precision: int = 8, scale: int = 2, **modifiers: Any) -> None:
        self._column(name, f"decimal({precision}, {scale})", **modifiers)

    def date(self, name: str, **modifiers: Any) -> None:
        self._column(name, "date", **modifiers)

    def time(self, name: str, **modifiers: Any) -> None:
        self._column(name, "time", **modifiers)

    def timestamp(self, name: str, **modifiers: Any) -> None:
        self._column(name, "timestamptz", **modifiers)

    def timestamps(self, default_to_now: bool = False) -> None:
        """Add ``created_at`` and ``updated_at`` timestamp columns.

        Args:
            default_to_now: Make both columns not null, defaulting to
                CURRENT_TIMESTAMP
        """
        modifiers: dict[str, Any] = {}
        if default_to_now:
            modifiers = {"nullable": False, "default": Raw("CURRENT_TIMESTAMP")}
        self.timestamp("created_at", **modifiers)
        self.timestamp("updated_at", **modifiers)

    def uuid(self, name: str, **modifiers: Any) -> None:
        self._column(name, "uuid", **modifiers)

    def json(self, name: str, **modifiers: Any) -> None:
        self._column(name, "json", **modifiers)

    def jsonb(self, name: str, **modifiers: Any) -> None:
        self._column(name, "jsonb", **modifiers)

    def binary(self, name: str, **modifiers: Any) -> None:
        self._column(name, "bytea", **modifiers)

    def specific_type(self, name: str, sql_type: str, **modifiers: Any) -> None:
        """Column with a caller-supplied SQL type, emitted verbatim."""
        self._column(name, sql_type, **modifiers)

    # Table constraints

    def primary(self, columns: Sequence[str], constraint_name: str | None = None) -> None:
        """Composite primary key constraint."""
        self._constraint(f"primary key ({self._column_list(columns)})", constraint_name)

    def unique_together(self, columns: Sequence[str], constraint_name: str | None = None) -> None:
        """Unique constraint across one or more columns."""
        self._constraint(f"unique ({self._column_list(columns)})", constraint_name)

    def foreign(
        self,
        column: str,
        references: str,
        on_delete: str | None = None,
        on_update: str | None = None,
        constraint_name: str | None = None,
    ) -> None:
        """Foreign key constraint.

        Args:
            column: Referencing column in this table
            references: ``table.column`` or ``namespace.table.column``
            on_delete: Optional referential action, e.g. ``cascade``
            on_update: Optional referential action
            constraint_name: Optional explicit constraint name

        Raises:
            InvalidOperationError: If ``references`` names no column
        """
        parts = references.split(".")
        if len(parts) < 2:
            raise InvalidOperationError(
                f"Foreign key reference must be 'table.column', got: {references}"
            )
        target = ".".join(quote_identifier(part) for part in parts[:-1])
        definition = (
            f"foreign key ({quote_identifier(column)}) "
            f"references {target} ({quote_identifier(parts[-1])})"
        )
        if on_delete:
            definition += f" on delete {on_delete}"
        if on_update:
            definition += f" on update {on_update}"
        self._constraint(definition, constraint_name)

    def check(self, expression: str, constraint_name: str | None = None) -> None:
        """Check constraint; the expression is emitted verbatim."""
        self._constraint(f"check ({expression})", constraint_name)

    # Alter-only operations

    def drop_column(self, name: str) -> None:
        self._require_alter("drop_column")
        self.push(f"drop column {quote_identifier(name)}")

    def rename_column(self, old_name: str, new_name: str) -> None:
        self._require_alter("rename_column")
        self.push(
            f"rename column {quote_identifier(old_name)} to {quote_identifier(new_name)}"
        )

    # Helpers

    def _column(
        self,
        name: str,
        sql_type: str,
        nullable: bool = True,
        unique: bool = False,
        primary: bool = False,
        default: Any = None,
    ) -> None:
        parts = [quote_identifier(name), sql_type]
        if not nullable:
            parts.append("not null")
        if unique:
            parts.append("unique")
        if primary:
            parts.append("primary key")
        if default is not None:
            parts.append(f"default {format_default(default)}")

        definition = " ".join(parts)
        if self.mode is TableMode.ALTER:
            definition = f"add column {definition}"
        self.push(definition)

    def _constraint(self, definition: str, constraint_name: str | None) -> None:
        if constraint_name:
            definition = f"constraint {quote_identifier(constraint_name)} {definition}"
        if self.mode is TableMode.ALTER:
            definition = f"add {definition}"
        self.push(definition)

    def _require_alter(self, operation: str) -> None:
        if self.mode is not TableMode.ALTER:
            raise InvalidOperationError(
                f"{operation} is only valid when altering a table, not for {self._name!r}"
            )

    @staticmethod
    def _column_list(columns: Sequence[str]) -> str:
        if isinstance(columns, str):
            columns = [columns]
        return ", ".join(quote_identifier(column) for column in columns)
