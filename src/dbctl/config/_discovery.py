"""Configuration source discovery."""

from typing import TYPE_CHECKING, Any

from dbctl.config._defaults import DEFAULT_CONFIG
from dbctl.config._loader import parse_env_vars
from dbctl.config._models import ConfigSource, ConfigSourceName
from dbctl.utils import get_default_config_file, get_user_config_file

if TYPE_CHECKING:
    from pathlib import Path


def _has_env_values() -> bool:
    return bool(parse_env_vars())


def discover_sources(
    *,
    config_path: Path | None = None,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover configuration sources, highest precedence first.

    File sources are returned with empty values; ``Config.load`` reads them.

    Args:
        config_path: Explicit project config file. Uses ``./dbctl.toml`` if None.
        include_env: Include the environment source.
        cli_overrides: Values from command-line flags.

    Returns:
        Sources ordered CLI, ENV, PROJECT, USER, DEFAULT.
    """
    sources: list[ConfigSource] = []

    if cli_overrides:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=True,
                values=cli_overrides,
            )
        )

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=_has_env_values(),
                values={},
            )
        )

    project_file = config_path if config_path is not None else get_default_config_file()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=project_file,
            exists=project_file.is_file(),
            values={},
        )
    )

    user_file = get_user_config_file()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_file,
            exists=user_file.is_file(),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
