"""
Configuration-based factory for schemas and DuckDB appliers.

Builds schemas with the configured rendering defaults and wires DuckDB
connections from the ``database`` section.
"""

import logging
from typing import Optional

from schema_builder.domain.schema import Schema
from schema_builder.infrastructure.duckdb import (
    DuckDBConfig,
    DuckDBConnection,
    DuckDBSchemaApplier,
)

from .schema import DatabaseConfig, RenderingConfig, SchemaBuilderConfig, validate_config
from .settings import ConfigManager, ConfigurationError


class ConfiguredSchemaFactory:
    """
    Factory for schema builder components with configuration injection.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize the factory with configuration.

        Args:
            config_manager: Configuration manager instance (uses global if None)

        Raises:
            ConfigurationError: If the configuration does not validate
        """
        if config_manager is None:
            from . import settings
            config_manager = settings.config
        self.config_manager = config_manager
        self._logger = logging.getLogger(__name__)
        self._validated_config = self._validate_configuration()

    def _validate_configuration(self) -> SchemaBuilderConfig:
        try:
            validated = validate_config(self.config_manager.get_all())
            self._logger.debug("Configuration validation successful")
            return validated
        except Exception as e:
            self._logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @property
    def validated_config(self) -> SchemaBuilderConfig:
        return self._validated_config

    def get_rendering_config(self) -> RenderingConfig:
        return self._validated_config.rendering

    def get_database_config(self) -> DatabaseConfig:
        return self._validated_config.database

    def create_schema(self, namespace: Optional[str] = None) -> Schema:
        """
        Create an empty schema with the configured rendering defaults.

        Args:
            namespace: Overrides the configured default namespace

        Returns:
            Schema in building state
        """
        rendering = self.get_rendering_config()
        return Schema(
            namespace=namespace or rendering.namespace,
            separator=rendering.separator,
            require_namespace=rendering.require_namespace,
        )

    def create_duckdb_config(self) -> DuckDBConfig:
        db_config = self.get_database_config()
        return DuckDBConfig(
            memory_limit=db_config.memory_limit,
            threads=db_config.threads,
            timezone=db_config.timezone,
            read_only=db_config.read_only,
        )

    def create_connection(self, database_path: Optional[str] = None) -> DuckDBConnection:
        """
        Create an unconnected DuckDB connection.

        Args:
            database_path: Overrides the configured database path
        """
        path = database_path or self.get_database_config().database_path
        self._logger.debug(f"Creating DuckDB connection for: {path}")
        return DuckDBConnection(path, self.create_duckdb_config())

    def create_applier(self, connection: DuckDBConnection) -> DuckDBSchemaApplier:
        return DuckDBSchemaApplier(connection)
