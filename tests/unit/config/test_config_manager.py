"""Unit tests for configuration management."""

import logging.config

import pytest
import yaml

from schema_builder.config import get_config, get_log_config, reload_config, validate_config
from schema_builder.config.settings import ConfigManager, ConfigurationError


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Minimal configuration directory with a base and a staging file."""
    monkeypatch.delenv("SCHEMA_BUILDER_ENVIRONMENT", raising=False)
    write_yaml(tmp_path / "base.yaml", {
        "application": {"name": "Test Builder", "environment": "development", "debug": False},
        "rendering": {"namespace": None, "separator": "; ", "require_namespace": False},
        "database": {"database_path": ":memory:", "threads": 2},
        "logging": {"level": "INFO", "handlers": {"console": {"enabled": True}}},
    })
    write_yaml(tmp_path / "staging.yaml", {
        "rendering": {"namespace": "staging"},
        "database": {"threads": 4},
    })
    return tmp_path


class TestConfigManager:
    """Test configuration manager functionality."""

    def test_default_configuration_loads_testing_environment(self):
        config = ConfigManager()

        assert config.get("application.name") == "Schema Builder"
        assert config.get_environment() == "testing"
        assert config.is_testing() is True
        assert config.get("database.database_path") == ":memory:"
        assert config.get("rendering.separator") == "; "

    def test_base_configuration(self, config_dir):
        config = ConfigManager(config_dir=config_dir)

        assert config.config_path == config_dir
        assert config.get("application.name") == "Test Builder"
        assert config.get_environment() == "development"
        assert config.is_debug() is False
        assert config.get("rendering.namespace") is None

    def test_environment_file_is_merged(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_ENVIRONMENT", "staging")

        config = ConfigManager(config_dir=config_dir)

        assert config.get_environment() == "staging"
        assert config.get("rendering.namespace") == "staging"
        assert config.get("database.threads") == 4
        assert config.get("database.database_path") == ":memory:"

    def test_get_with_default_values(self, config_dir):
        config = ConfigManager(config_dir=config_dir)

        assert config.get("nonexistent.key", "fallback") == "fallback"
        assert config.get("nonexistent.key") is None
        assert config.get("application.name.deeper", "fallback") == "fallback"

    def test_get_section(self, config_dir):
        config = ConfigManager(config_dir=config_dir)

        assert config.get_section("database")["threads"] == 2
        assert config.get_section("nonexistent") == {}
        assert config.get_section("application.name") == {}

    def test_has_and_set(self, config_dir):
        config = ConfigManager(config_dir=config_dir)

        assert config.has("application.name") is True
        assert config.has("rendering.namespace") is False

        config.set("rendering.namespace", "public")
        assert config.get("rendering.namespace") == "public"

    def test_missing_base_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager(config_dir=tmp_path)

    def test_invalid_base_yaml_raises(self, tmp_path):
        (tmp_path / "base.yaml").write_text("rendering: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigManager(config_dir=tmp_path)


class TestEnvironmentOverrides:
    """Test SCHEMA_BUILDER_* environment variable overrides."""

    def test_string_override(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_RENDERING_NAMESPACE", "public")

        config = ConfigManager(config_dir=config_dir)

        assert config.get("rendering.namespace") == "public"

    def test_underscored_key_resolves_to_existing_key(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_RENDERING_REQUIRE_NAMESPACE", "true")
        monkeypatch.setenv("SCHEMA_BUILDER_DATABASE_DATABASE_PATH", "/tmp/schema.duckdb")

        config = ConfigManager(config_dir=config_dir)

        assert config.get("rendering.require_namespace") is True
        assert config.get("database.database_path") == "/tmp/schema.duckdb"

    def test_integer_override(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_DATABASE_THREADS", "8")

        config = ConfigManager(config_dir=config_dir)

        assert config.get("database.threads") == 8

    def test_string_setting_keeps_raw_text(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_RENDERING_SEPARATOR", ",\n")

        config = ConfigManager(config_dir=config_dir)

        assert config.get("rendering.separator") == ",\n"
        assert validate_config(config.get_all()).rendering.separator == ",\n"

    def test_unknown_key_creates_nested_value(self, config_dir, monkeypatch):
        monkeypatch.setenv("SCHEMA_BUILDER_EXTRA_FLAG", "false")

        config = ConfigManager(config_dir=config_dir)

        assert config.get("extra.flag", "unset") is False

    @pytest.mark.parametrize("raw, expected", [
        ("null", None),
        ("", None),
        ("TRUE", True),
        ("a, b,c", ["a", "b", "c"]),
        ("12", 12),
        ("1.5", 1.5),
        ("main", "main"),
    ])
    def test_parse_env_value(self, config_dir, raw, expected):
        config = ConfigManager(config_dir=config_dir)

        assert config._parse_env_value(raw) == expected


class TestLogConfig:
    """Test conversion of the logging section to dictConfig format."""

    def test_console_only(self, config_dir):
        log_config = get_log_config(ConfigManager(config_dir=config_dir))

        assert log_config["version"] == 1
        assert log_config["root"] == {"level": "INFO", "handlers": ["console"]}
        assert log_config["handlers"]["console"]["class"] == "logging.StreamHandler"
        logging.config.dictConfig(log_config)

    def test_file_handler(self, config_dir, tmp_path):
        config = ConfigManager(config_dir=config_dir)
        config.set("logging.handlers.file", {
            "enabled": True,
            "path": str(tmp_path / "builder.log"),
            "max_size": "2MB",
            "backup_count": 3,
        })

        log_config = get_log_config(config)

        file_handler = log_config["handlers"]["file"]
        assert file_handler["maxBytes"] == 2 * 1024 * 1024
        assert file_handler["backupCount"] == 3
        assert log_config["root"]["handlers"] == ["console", "file"]

    def test_reload_config_replaces_global_instance(self):
        before = get_config()

        after = reload_config()

        assert after is not before
        assert get_config() is after
