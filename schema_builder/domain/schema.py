"""Deferred schema builder.

``Schema`` records table requests together with the callback that describes
each table, without invoking anything. ``render()`` replays every callback
once, in registration order, against the table's own skeleton and turns the
result into DDL text.

Usage:
    schema = Schema.with_namespace("public").create_table(
        "users", lambda table: table.increments()
    )
    schema.render()
    # create table "public"."users" ("id" serial primary key)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .exceptions import (
    MissingNamespaceError,
    SchemaAlreadyRenderedError,
    SchemaRenderError,
)
from .table import Table, TableMode, quote_identifier

logger = logging.getLogger(__name__)

TableCallback = Callable[[Table], None]


class StatementKind(Enum):
    """Kinds of DDL statement a job renders to."""

    CREATE = "create"
    CREATE_IF_NOT_EXISTS = "create_if_not_exists"
    ALTER = "alter"
    RENAME = "rename"
    DROP = "drop"
    DROP_IF_EXISTS = "drop_if_exists"


_STATEMENT_TEMPLATES = {
    StatementKind.CREATE: "create table {name} ({body})",
    StatementKind.CREATE_IF_NOT_EXISTS: "create table if not exists {name} ({body})",
    StatementKind.ALTER: "alter table {name} {body}",
    StatementKind.RENAME: "alter table {name} rename to {new_name}",
    StatementKind.DROP: "drop table {name}",
    StatementKind.DROP_IF_EXISTS: "drop table if exists {name}",
}


class SchemaState(Enum):
    """Lifecycle of a schema."""

    BUILDING = "building"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True)
class Job:
    """A pending statement: the table skeleton and the callback that fills it.

    ``callback`` is None for statements that take no column definitions
    (rename, drop).
    """

    table: Table
    callback: TableCallback | None = None
    kind: StatementKind = StatementKind.CREATE
    new_name: str | None = None


class Schema:
    """Accumulates table jobs and renders them to DDL on demand.

    Registration methods return the schema itself so calls can be chained.
    Rendering happens once: the first ``render()`` replays the callbacks and
    caches the statements, later calls return the cached output. A schema
    is not safe to share between threads while it is being built or rendered.
    """

    DEFAULT_SEPARATOR = "; "

    def __init__(
        self,
        namespace: str | None = None,
        separator: str = DEFAULT_SEPARATOR,
        require_namespace: bool = False,
    ):
        """Initialize an empty schema.

        Args:
            namespace: SQL schema qualifying every table name, if any
            separator: Text placed between rendered statements
            require_namespace: Raise MissingNamespaceError on render when no
                namespace is set, instead of emitting unqualified names

        Raises:
            ValueError: If namespace is an empty string
        """
        if namespace is not None and not namespace:
            raise ValueError("namespace must be a non-empty string")

        self._namespace = namespace
        self.separator = separator
        self.require_namespace = require_namespace
        self._jobs: list[Job] = []
        self._state = SchemaState.BUILDING
        self._statements: list[str] | None = None

    @classmethod
    def with_namespace(cls, namespace: str, **options) -> "Schema":
        """Create a schema whose tables are qualified by ``namespace``."""
        if not namespace:
            raise ValueError("namespace must be a non-empty string")
        return cls(namespace=namespace, **options)

    @property
    def namespace(self) -> str | None:
        return self._namespace

    @property
    def jobs(self) -> tuple[Job, ...]:
        """Registered jobs in registration order."""
        return tuple(self._jobs)

    @property
    def state(self) -> SchemaState:
        return self._state

    @property
    def is_rendered(self) -> bool:
        return self._state is SchemaState.RENDERED

    def __repr__(self) -> str:
        return (
            f"Schema(namespace={self._namespace!r}, jobs={len(self._jobs)}, "
            f"state={self._state.value})"
        )

    # Registration

    def create_table(self, name: str, callback: TableCallback) -> "Schema":
        """Register a ``create table`` statement.

        The callback is not invoked here; it runs once, with the table's
        skeleton, when the schema is rendered.
        """
        return self._register(Job(Table(name), callback, StatementKind.CREATE))

    def create_table_if_not_exists(self, name: str, callback: TableCallback) -> "Schema":
        """Register a ``create table if not exists`` statement."""
        return self._register(
            Job(Table(name), callback, StatementKind.CREATE_IF_NOT_EXISTS)
        )

    def table(self, name: str, callback: TableCallback) -> "Schema":
        """Register an ``alter table`` statement for an existing table."""
        return self._register(
            Job(Table(name, mode=TableMode.ALTER), callback, StatementKind.ALTER)
        )

    def rename_table(self, name: str, new_name: str) -> "Schema":
        return self._register(
            Job(Table(name), None, StatementKind.RENAME, new_name=new_name)
        )

    def drop_table(self, name: str) -> "Schema":
        return self._register(Job(Table(name), None, StatementKind.DROP))

    def drop_table_if_exists(self, name: str) -> "Schema":
        return self._register(Job(Table(name), None, StatementKind.DROP_IF_EXISTS))

    def _register(self, job: Job) -> "Schema":
        if self._state is not SchemaState.BUILDING:
            raise SchemaAlreadyRenderedError(
                f"Cannot register table {job.table.name!r}: schema is {self._state.value}"
            )
        if job.callback is not None and not callable(job.callback):
            raise TypeError(f"Callback for table {job.table.name!r} is not callable")

        self._jobs.append(job)
        logger.debug(f"Registered {job.kind.value} job for table: {job.table.name}")
        return self

    # Rendering

    def qualify(self, name: str) -> str:
        """Quoted table name, prefixed with the namespace when one is set."""
        if self._namespace is None:
            return quote_identifier(name)
        return f"{quote_identifier(self._namespace)}.{quote_identifier(name)}"

    def statements(self) -> list[str]:
        """Render every job and return the statements in registration order.

        Raises:
            MissingNamespaceError: If a namespace is required but not set
            SchemaRenderError: If a previous render failed
        """
        if self._state is SchemaState.RENDERED:
            return list(self._statements)
        if self._state is SchemaState.FAILED:
            raise SchemaRenderError("Schema cannot be rendered after a failed render")

        if self._jobs and self.require_namespace and self._namespace is None:
            raise MissingNamespaceError(
                f"Schema has {len(self._jobs)} job(s) but no namespace configured"
            )

        statements = []
        try:
            for job in self._jobs:
                if job.callback is not None:
                    job.callback(job.table)
                statement = self._render_job(job)
                logger.debug(f"Rendered statement: {statement}")
                statements.append(statement)
        except BaseException as e:
            # Tables already hold the fragments of the callbacks that ran
            self._state = SchemaState.FAILED
            logger.error(
                f"Schema render failed at job {len(statements) + 1}: {type(e).__name__}: {e}"
            )
            raise

        self._statements = statements
        self._state = SchemaState.RENDERED
        logger.info(f"Rendered {len(statements)} statement(s) for namespace: {self._namespace}")
        return list(statements)

    def render(self) -> str:
        """Render the schema to a single DDL string.

        Statements are joined with ``separator``; no trailing terminator is
        added. A schema with no jobs renders to an empty string.
        """
        return self.separator.join(self.statements())

    def _render_job(self, job: Job) -> str:
        template = _STATEMENT_TEMPLATES[job.kind]
        new_name = quote_identifier(job.new_name) if job.new_name is not None else ""
        statement = template.format(
            name=self.qualify(job.table.name),
            body="".join(job.table.items),
            new_name=new_name,
        )
        return statement.rstrip()
