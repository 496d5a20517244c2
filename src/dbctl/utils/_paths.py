"""Default filesystem locations used by dbctl."""

import os
from pathlib import Path

import platformdirs

_HOME_ENV = "DBCTL_HOME"


def get_dbctl_home() -> Path:
    """Return the dbctl state directory.

    Uses DBCTL_HOME when set, otherwise ``~/.dbctl``.
    """
    override = os.environ.get(_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".dbctl"


def get_dbctl_log_dir() -> Path:
    """Return the directory holding dbctl's own logs."""
    return get_dbctl_home() / "logs"


def get_dbctl_cli_log_file() -> Path:
    """Return the default log file for CLI commands."""
    return get_dbctl_log_dir() / "cli.log"


def get_default_config_file() -> Path:
    """Return the configuration file looked up in the working directory."""
    return Path.cwd() / "dbctl.toml"


def get_user_config_file() -> Path:
    """Return the per-user configuration file.

    Lives in DBCTL_HOME when that is set, otherwise in the platform's user
    config directory.
    """
    if os.environ.get(_HOME_ENV):
        return get_dbctl_home() / "dbctl.toml"
    return platformdirs.user_config_path("dbctl") / "dbctl.toml"
