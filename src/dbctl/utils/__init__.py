"""Utilities shared across dbctl."""

from ._exec import (
    MAX_LOGGED_OUTPUT_BYTES,
    CommandResult,
    build_command,
    run_command,
    spawn_detached,
    truncate_output,
)
from ._logging import (
    Rendering,
    create_file_logger,
    create_null_logger,
    resolve_level,
)
from ._names import MAX_DATABASE_NAME_LENGTH, is_valid_database_name
from ._paths import (
    get_dbctl_cli_log_file,
    get_dbctl_home,
    get_dbctl_log_dir,
    get_default_config_file,
    get_user_config_file,
)
from ._tools import (
    DEFAULT_SBIN_DIRS,
    ServerTools,
    ToolName,
    discover_tools,
    find_tool,
    tool_names,
    validate_tool,
)

__all__ = [
    "DEFAULT_SBIN_DIRS",
    "MAX_DATABASE_NAME_LENGTH",
    "MAX_LOGGED_OUTPUT_BYTES",
    "CommandResult",
    "Rendering",
    "ServerTools",
    "ToolName",
    "build_command",
    "create_file_logger",
    "create_null_logger",
    "discover_tools",
    "find_tool",
    "get_dbctl_cli_log_file",
    "get_dbctl_home",
    "get_dbctl_log_dir",
    "get_default_config_file",
    "get_user_config_file",
    "is_valid_database_name",
    "resolve_level",
    "run_command",
    "spawn_detached",
    "tool_names",
    "truncate_output",
    "validate_tool",
]
