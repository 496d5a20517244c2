"""dbctl configuration.

This module provides the public API for dbctl configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from dbctl.config import Config
    >>> config = Config.from_dict({"server": {"data_dir": "/var/lib/mysql"}})
    >>> config.to_handle().pid_file
    PosixPath('/var/lib/mysql/mysqld.pid')
"""

# Re-export exceptions from main exceptions module
from dbctl.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

# Defaults
from ._defaults import DEFAULT_CONFIG

# Discovery utilities
from ._discovery import discover_sources
from ._load import STRICT_CONFIG_ENV, is_strict_config, safe_load_config

# Loader utilities
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    flatten_keys,
    parse_env_vars,
    parse_env_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    DEFAULT_PID_FILE_NAME,
    Config,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PollConfig,
    ServerConfig,
    ToolsConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_PID_FILE_NAME",
    "ENV_PREFIX",
    "STRICT_CONFIG_ENV",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PollConfig",
    "ServerConfig",
    "ToolsConfig",
    "deep_merge",
    "discover_sources",
    "flatten_keys",
    "is_strict_config",
    "parse_env_vars",
    "parse_env_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
