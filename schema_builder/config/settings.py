"""Layered configuration for the schema builder.

Values are resolved in three layers, later layers winning:

1. ``base.yaml`` in the configuration directory (required)
2. ``<environment>.yaml`` for the selected environment (optional)
3. ``SCHEMA_BUILDER_<SECTION>_<KEY>`` environment variables

The environment is taken from ``SCHEMA_BUILDER_ENVIRONMENT`` or, failing
that, from ``application.environment`` in the base file.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from schema_builder.domain.exceptions import SchemaBuilderError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent / "defaults"
_NULL_VALUES = ('', 'null', 'none')


class ConfigurationError(SchemaBuilderError):
    """Raised when configuration loading or validation fails."""

    pass


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path.name}: {e}") from e


def _merge(target: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overlay.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge(current, value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """Reads and merges configuration, then serves dot-notation lookups.

    Loading happens in the constructor, so a broken configuration fails
    fast with ConfigurationError.
    """

    def __init__(self, config_dir: Optional[Path] = None, env_prefix: str = "SCHEMA_BUILDER"):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.env_prefix = env_prefix
        self._config = self._load()

    @property
    def config_path(self) -> Path:
        return self.config_dir

    def _load(self) -> Dict[str, Any]:
        base_file = self.config_dir / "base.yaml"
        if not base_file.is_file():
            logger.error(f"Base configuration file not found: {base_file}")
            raise ConfigurationError(f"Base configuration file not found: {base_file}")

        data = _read_yaml(base_file)
        environment = os.environ.get(
            f"{self.env_prefix}_ENVIRONMENT",
            data.get("application", {}).get("environment", "development"),
        )

        env_file = self.config_dir / f"{environment}.yaml"
        if env_file.is_file():
            try:
                _merge(data, _read_yaml(env_file))
                logger.debug(f"Merged environment configuration: {env_file.name}")
            except ConfigurationError as e:
                logger.warning(f"Skipping environment configuration: {e}")
        data.setdefault("application", {})["environment"] = environment

        overrides = self._apply_env_overrides(data)
        logger.info(
            f"Configuration loaded for environment {environment} "
            f"({overrides} environment override(s))"
        )
        return data

    def _apply_env_overrides(self, data: Dict[str, Any]) -> int:
        prefix = f"{self.env_prefix}_"
        applied = 0
        for name, raw in os.environ.items():
            key = name[len(prefix):].lower() if name.startswith(prefix) else None
            if not key or key == "environment":
                continue

            path = self._resolve_config_path(data, key.split('_'))
            value = self._parse_env_value(raw, current=self._lookup(data, path))
            try:
                self._set_nested_value(data, path, value)
            except ConfigurationError as e:
                logger.warning(f"Ignoring {name}: {e}")
                continue
            applied += 1
            logger.debug(f"{name} overrides {'.'.join(path)}")
        return applied

    def _resolve_config_path(self, data: Dict[str, Any], tokens: List[str]) -> List[str]:
        """Map underscore-split tokens onto existing keys.

        ``rendering_require_namespace`` resolves to
        ``["rendering", "require_namespace"]`` because ``require_namespace``
        is an existing key; unknown keys fall back to one token per level.
        """
        path: List[str] = []
        node: Any = data
        while tokens:
            size = 1
            if isinstance(node, dict):
                size = next(
                    (n for n in range(len(tokens), 0, -1) if "_".join(tokens[:n]) in node),
                    1,
                )
            key = "_".join(tokens[:size])
            path.append(key)
            node = node.get(key) if isinstance(node, dict) else None
            tokens = tokens[size:]
        return path

    def _parse_env_value(self, value: str, current: Any = None) -> Any:
        """Convert an environment string to the type the setting needs.

        A setting whose current value is a string keeps the raw text, so
        values such as a ``",\\n"`` separator are not split into lists.
        """
        if isinstance(current, str):
            return value

        lowered = value.lower()
        if lowered in _NULL_VALUES:
            return None
        if lowered in ('true', 'false'):
            return lowered == 'true'
        if ',' in value:
            return [item.strip() for item in value.split(',') if item.strip()]
        for number in (int, float):
            try:
                return number(value)
            except ValueError:
                pass
        return value

    @staticmethod
    def _lookup(data: Dict[str, Any], path: List[str]) -> Any:
        node: Any = data
        for key in path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node

    def _set_nested_value(self, data: Dict[str, Any], path: List[str], value: Any) -> None:
        node = data
        for key in path[:-1]:
            child = node.get(key)
            if child is None:
                child = node[key] = {}
            elif not isinstance(child, dict):
                raise ConfigurationError(f"'{key}' is not a section")
            node = child
        node[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dot-notation key, or ``default`` when unset or null."""
        value = self._lookup(self._config, key.split('.'))
        return default if value is None else value

    def get_section(self, section: str) -> Dict[str, Any]:
        value = self.get(section)
        return value if isinstance(value, dict) else {}

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        self._set_nested_value(self._config, key.split('.'), value)

    def get_all(self) -> Dict[str, Any]:
        return self._config.copy()

    def get_environment(self) -> str:
        return self.get("application.environment", "development")

    def is_debug(self) -> bool:
        return bool(self.get("application.debug", False))

    def is_testing(self) -> bool:
        return self.get_environment().lower() == "testing"


# Global configuration instance
config = ConfigManager()
