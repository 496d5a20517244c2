"""Configuration loading with error handling for the CLI."""

import os
import sys
from typing import TYPE_CHECKING

from dbctl.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path

STRICT_CONFIG_ENV = "DBCTL_STRICT_CONFIG"


def is_strict_config() -> bool:
    """Return True when DBCTL_STRICT_CONFIG=1."""
    return os.environ.get(STRICT_CONFIG_ENV, "0") == "1"


def safe_load_config(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Handles errors based on the DBCTL_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and return the default config
    - If "1": re-raise the error

    When config_path is provided, the file must exist (explicit user request)
    regardless of strict mode.

    Args:
        config_path: Explicit path to config file (--config flag).
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
        On failure (non-strict mode), returns the default Config with the
        error message.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
        ConfigError: If loading fails in strict mode.
    """
    if config_path is not None and not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    try:
        config = Config.load(config_path=config_path, cli_overrides=cli_overrides)
    except (ConfigError, OSError) as e:
        if is_strict_config():
            raise
        error_msg = str(e)
        print(f"Warning: Failed to load config: {error_msg}", file=sys.stderr)
        return Config.from_dict({}), error_msg
    else:
        return config, None
