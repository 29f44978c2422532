"""Configuration validation schemas using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApplicationConfig(BaseModel):
    """Application-level configuration."""

    name: str = Field("Schema Builder", description="Application name")
    version: str = Field("0.1.0", description="Application version")
    environment: str = Field("development", description="Environment name")
    debug: bool = Field(False, description="Debug mode")


class RenderingConfig(BaseModel):
    """Defaults applied to schemas built through the configured factory."""

    namespace: str | None = Field(None, description="Default SQL schema for tables")
    separator: str = Field("; ", description="Text placed between statements")
    require_namespace: bool = Field(
        False, description="Fail rendering when no namespace is configured"
    )

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v):
        if v is not None and not v:
            raise ValueError("namespace cannot be empty")
        return v


class DatabaseConfig(BaseModel):
    """DuckDB target used when applying schemas."""

    database_path: str = Field(..., description="Path to DuckDB database file")
    memory_limit: str = Field("1GB", description="DuckDB memory limit")
    threads: int = Field(2, ge=1, le=64, description="DuckDB worker threads")
    timezone: str = Field("UTC", description="Session time zone")
    read_only: bool = Field(False, description="Open database in read-only mode")
    create_namespace: bool = Field(
        True, description="Create the namespace before applying tables"
    )

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v):
        if not v:
            raise ValueError("database_path cannot be empty")
        return v


class LogHandlerConfig(BaseModel):
    """Log handler configuration."""

    enabled: bool = Field(True, description="Enable handler")
    path: str | None = Field(None, description="Log file path")
    max_size: str | None = Field(None, description="Maximum log file size")
    backup_count: int | None = Field(None, description="Number of backup files")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format"
    )
    handlers: dict[str, LogHandlerConfig] = Field(default_factory=dict)

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log level must be one of {valid_levels}")
        return v.upper()


class SchemaBuilderConfig(BaseModel):
    """Complete schema builder configuration."""

    model_config = ConfigDict(extra="allow")

    application: ApplicationConfig
    rendering: RenderingConfig
    database: DatabaseConfig
    logging: LoggingConfig


def validate_config(config_dict: dict) -> SchemaBuilderConfig:
    """
    Validate configuration dictionary against schema.

    Args:
        config_dict: Configuration dictionary to validate

    Returns:
        Validated configuration object

    Raises:
        ValidationError: If configuration is invalid
    """
    return SchemaBuilderConfig(**config_dict)
