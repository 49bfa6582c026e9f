"""Application configuration helpers."""

from __future__ import annotations

from .compliance import (
    ImportSourceConfig,
    MatchingConfig,
    get_import_source_config,
    get_matching_config,
)
from .env import env_flag, env_int, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportSourceConfig",
    "InvalidConfigurationValueError",
    "MatchingConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_database_config",
    "get_database_uri",
    "get_import_source_config",
    "get_matching_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
