"""DuckDB configuration management."""

import os
from dataclasses import dataclass


@dataclass
class DuckDBConfig:
    """Configuration settings for DuckDB connections used to apply schemas.

    Supports environment-based overrides so the same schema module can be
    applied with different resource limits per deployment.
    """

    memory_limit: str = "1GB"
    threads: int = 2
    timezone: str = "UTC"
    read_only: bool = False

    @classmethod
    def from_environment(cls, **overrides) -> "DuckDBConfig":
        """Create configuration from environment variables with optional overrides.

        Environment variables:
        - DUCKDB_MEMORY_LIMIT: Memory limit (default: 1GB)
        - DUCKDB_THREADS: Number of threads (default: 2)
        - DUCKDB_TIMEZONE: Timezone (default: UTC)
        - DUCKDB_READ_ONLY: Read-only mode (default: false)

        Args:
            **overrides: Configuration overrides

        Returns:
            DuckDBConfig instance with environment-based settings
        """
        config = cls(
            memory_limit=os.getenv("DUCKDB_MEMORY_LIMIT", cls.memory_limit),
            threads=int(os.getenv("DUCKDB_THREADS", str(cls.threads))),
            timezone=os.getenv("DUCKDB_TIMEZONE", cls.timezone),
            read_only=os.getenv("DUCKDB_READ_ONLY", "false").lower() == "true",
        )

        for key, value in overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)

        return config

    def get_connection_settings(self) -> list[str]:
        """SQL SET commands applied to every new connection."""
        return [
            f"SET memory_limit='{self.memory_limit}'",
            f"SET threads TO {self.threads}",
            f"SET TimeZone='{self.timezone}'",
        ]

    def __str__(self) -> str:
        return (
            f"DuckDBConfig(memory_limit={self.memory_limit}, "
            f"threads={self.threads}, timezone={self.timezone}, "
            f"read_only={self.read_only})"
        )
