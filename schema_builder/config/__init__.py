"""Configuration management for the schema builder."""

from . import settings
from .factory import ConfiguredSchemaFactory
from .schema import SchemaBuilderConfig, validate_config
from .settings import ConfigManager, ConfigurationError, config

__all__ = [
    "ConfigManager",
    "ConfigurationError",
    "config",
    "ConfiguredSchemaFactory",
    "SchemaBuilderConfig",
    "validate_config",
    "get_config",
    "reload_config",
    "get_log_config",
]


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager: Global configuration instance
    """
    return settings.config


def reload_config() -> ConfigManager:
    """
    Reload configuration from files and environment variables.

    Returns:
        The new global configuration instance
    """
    global config
    settings.config = ConfigManager()
    config = settings.config
    return config


def get_log_config(config_manager: ConfigManager | None = None) -> dict:
    """
    Get logging configuration suitable for Python's logging.dictConfig().

    Args:
        config_manager: Configuration to read (uses the global one if None)

    Returns:
        Logging configuration dictionary
    """
    log_config = (config_manager or get_config()).get_section("logging")
    level = log_config.get("level", "INFO")

    handlers = {}
    root_handlers = []

    if log_config.get("handlers", {}).get("console", {}).get("enabled", True):
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "default"
        }
        root_handlers.append("console")

    file_config = log_config.get("handlers", {}).get("file", {})
    if file_config.get("enabled", False):
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "default",
            "filename": file_config.get("path", "./logs/schema_builder.log"),
            "maxBytes": _parse_size(file_config.get("max_size", "10MB")),
            "backupCount": file_config.get("backup_count", 5)
        }
        root_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            }
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": root_handlers
        }
    }


def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string like "10MB", "1GB"

    Returns:
        Size in bytes
    """
    size_str = str(size_str).upper()
    multipliers = {
        'KB': 1024,
        'MB': 1024 * 1024,
        'GB': 1024 * 1024 * 1024,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            return int(float(size_str[:-len(suffix)]) * multiplier)

    return int(size_str)
