"""Configuration loading from environment variables and nodedit.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from nodedit.schema import Schema, get_schema

_CONFIG_FILENAME = "nodedit.toml"
_DEFAULT_URL = "mysql+aiomysql://root:@localhost/system"


@dataclass
class DatabaseConfig:
    """Where the node table lives."""

    url: str = _DEFAULT_URL
    table: str = "node"


@dataclass
class NodeditConfig:
    """Top-level configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    schema: str = "base"
    log_level: str = "WARNING"

    @property
    def table_schema(self) -> Schema:
        return get_schema(self.schema)


def load_config(config_path: Path | None = None) -> NodeditConfig:
    """Load configuration from environment variables and optional nodedit.toml.

    Priority: environment variables > nodedit.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.nodedit/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".nodedit" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    db_data = file_data.get("database", {})

    config = NodeditConfig(
        database=DatabaseConfig(
            url=os.getenv("NODEDIT_DATABASE_URL", db_data.get("url", _DEFAULT_URL)),
            table=os.getenv("NODEDIT_TABLE", db_data.get("table", "node")),
        ),
        schema=os.getenv("NODEDIT_SCHEMA", file_data.get("schema", "base")),
        log_level=os.getenv("NODEDIT_LOG_LEVEL", file_data.get("log_level", "WARNING")),
    )
    # Fail early on a typo rather than at the first command.
    get_schema(config.schema)
    return config
