# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

import json
import os
import tomllib
from typing import TYPE_CHECKING, Any

from dbctl.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "DBCTL_"

# Environment variables that control dbctl itself rather than config keys
_RESERVED_ENV_KEYS = frozenset({"DEBUG", "LOG_LEVEL", "HOME", "STRICT_CONFIG"})


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=e.lineno,
            column=e.colno,
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified.

    Merge rules:
        - Dictionaries are recursively merged
        - Arrays are replaced entirely (no element-wise merge)
        - Scalars are replaced with override value
        - Missing keys in override preserve base values

    Args:
        base: Base configuration (lower precedence).
        override: Override configuration (higher precedence).

    Returns:
        Merged configuration dictionary.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in set(base.keys()) | set(override.keys()):
        if key not in override:
            result[key] = copy_value(base[key])
        elif key not in base:
            result[key] = copy_value(override[key])
        else:
            base_val = base[key]
            override_val = override[key]

            if isinstance(base_val, dict) and isinstance(override_val, dict):
                result[key] = deep_merge(base_val, override_val)
            else:
                result[key] = copy_value(override_val)

    return result


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Create a deep copy of a configuration value.

    Args:
        value: The value to copy.

    Returns:
        A copy of dicts and lists; primitives are returned as is.
    """
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse an environment variable value.

    JSON arrays and objects are decoded so list settings such as
    ``tools.search_dirs`` can be given. Everything else stays a string and
    is coerced by the config models, so ``DBCTL_SERVER__USER=1000`` keeps
    the user name ``"1000"`` while ``DBCTL_SERVER__PORT=3307`` still
    validates as an integer.

    Args:
        value: Raw environment variable value.

    Returns:
        The decoded array or object, or the value unchanged.

    Examples:
        >>> parse_env_value('["/opt/mysql/bin"]')
        ['/opt/mysql/bin']
        >>> parse_env_value("3307")
        '3307'
    """
    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Args:
        d: The dictionary to modify.
        key_path: Dotted key path (e.g., "server.port").
        value: The value to set.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "server.port", 3307)
        >>> d
        {'server': {'port': 3307}}
    """
    parts = key_path.split(".")
    current = d
    for part in parts[:-1]:
        existing = current.get(part)
        if not isinstance(existing, dict):
            existing = {}
            current[part] = existing
        current = existing
    current[parts[-1]] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into config dictionary.

    Environment variable naming:
        - Add prefix (DBCTL_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: server.port -> DBCTL_SERVER__PORT

    DBCTL_DEBUG, DBCTL_LOG_LEVEL, DBCTL_HOME and DBCTL_STRICT_CONFIG
    control dbctl itself and are skipped.

    Args:
        prefix: Environment variable prefix.

    Returns:
        Dictionary of parsed config values with nested structure.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key or config_key in _RESERVED_ENV_KEYS:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_env_value(value))

    return result


def flatten_keys(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    prefix: str = "",
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Flatten nested tables into dotted keys, the inverse of set_nested_key.

    Example:
        >>> flatten_keys({"server": {"port": 3307, "lock": True}})
        {'server.port': 3307, 'server.lock': True}
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    for key, value in d.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict) and value:
            result.update(flatten_keys(value, dotted))
        else:
            result[dotted] = value
    return result
