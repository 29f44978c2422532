"""CLI commands for rendering and applying schemas."""

import asyncio
import importlib
import inspect
import logging.config

import click

from schema_builder.config import ConfiguredSchemaFactory, get_log_config
from schema_builder.config.settings import ConfigurationError
from schema_builder.domain.exceptions import SchemaBuilderError
from schema_builder.domain.schema import Schema


def load_schema(target: str, namespace: str | None = None) -> Schema:
    """Resolve ``module:attribute`` to a Schema.

    The attribute may be a Schema, a zero-argument callable returning one,
    or, when ``namespace`` is given, a callable taking the namespace.
    """
    if namespace is not None and not namespace:
        raise click.BadParameter("must be a non-empty string", param_hint="'--namespace'")

    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter(
            f"expected 'module:attribute', got {target!r}", param_hint="TARGET"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}", param_hint="TARGET") from e

    try:
        value = getattr(module, attribute)
    except AttributeError as e:
        raise click.BadParameter(
            f"{module_name!r} has no attribute {attribute!r}", param_hint="TARGET"
        ) from e

    if isinstance(value, Schema):
        if namespace is not None:
            raise click.UsageError(
                f"{target} is a Schema instance; --namespace needs a schema function"
            )
        return value

    if callable(value):
        if namespace is not None:
            if not inspect.signature(value).parameters:
                raise click.UsageError(f"{target} does not accept a namespace argument")
            schema = value(namespace)
        else:
            schema = value()
        if isinstance(schema, Schema):
            return schema

    raise click.BadParameter(f"{target} does not provide a Schema", param_hint="TARGET")


@click.group()
@click.option('--log-level', default=None, help='Override the configured log level')
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Render and apply declarative table schemas."""
    try:
        factory = ConfiguredSchemaFactory()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    log_config = get_log_config(factory.config_manager)
    if log_level:
        log_config["root"]["level"] = log_level.upper()
        for handler in log_config["handlers"].values():
            handler["level"] = log_config["root"]["level"]
    logging.config.dictConfig(log_config)

    ctx.obj = factory


@cli.command()
@click.argument('target')
@click.option('--namespace', default=None, help='Namespace passed to a schema function')
@click.pass_obj
def render(factory: ConfiguredSchemaFactory, target: str, namespace: str | None):
    """Print the DDL for TARGET (module:attribute)."""
    schema = load_schema(target, namespace)
    try:
        click.echo(schema.render())
    except SchemaBuilderError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument('target')
@click.option('--database', default=None, help='DuckDB database path (defaults to configured path)')
@click.option('--namespace', default=None, help='Namespace passed to a schema function')
@click.pass_obj
def apply(factory: ConfiguredSchemaFactory, target: str, database: str | None, namespace: str | None):
    """Render TARGET and execute it against a DuckDB database."""
    schema = load_schema(target, namespace)
    create_namespace = factory.get_database_config().create_namespace

    async def _apply():
        connection = factory.create_connection(database)
        async with connection:
            applier = factory.create_applier(connection)
            return await applier.apply(schema, create_namespace=create_namespace)

    try:
        result = asyncio.run(_apply())
    except SchemaBuilderError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Applied {result.executed_count} statement(s) to "
        f"{database or factory.get_database_config().database_path} "
        f"in {result.execution_time_ms:.1f}ms"
    )


def main():
    cli(prog_name="schema-builder")


if __name__ == "__main__":
    main()
