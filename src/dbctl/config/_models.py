# pyright: reportExplicitAny=false, reportAny=false
"""Configuration models with typed access.

This module defines the Pydantic models for each configuration section and
the Config container that merges sources and builds supervisor inputs.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from dbctl.config._defaults import DEFAULT_CONFIG
from dbctl.config._loader import (
    deep_merge,
    flatten_keys,
    parse_env_vars,
    read_toml_file,
)
from dbctl.exceptions import ConfigValidationError
from dbctl.supervisor import PollPolicy, ProcessHandle
from dbctl.utils import DEFAULT_SBIN_DIRS, discover_tools, tool_names

if TYPE_CHECKING:
    from typing import Self

    from pydantic_core import ErrorDetails

    from dbctl.utils import ServerTools

DEFAULT_PID_FILE_NAME = "mysqld.pid"


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names in precedence order.

    Values are ordered from highest precedence (CLI) to lowest (DEFAULT).
    """

    CLI = "cli"
    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """Represents a configuration source.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        exists: Whether the source exists (file exists, or values are present).
        values: Configuration values from this source.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]


class ServerConfig(BaseModel):
    """Server instance section.

    Attributes:
        data_dir: Data directory root. Required for every server operation.
        pid_file: PID file path. Defaults to ``<data_dir>/mysqld.pid``.
        port: TCP port to listen on.
        socket: UNIX domain socket path.
        log_error: Error log path. Errors go to syslog when unset.
        user: OS user the server runs as. Defaults to the current user.
        output_file: File receiving the start wrapper's stdout and stderr.
        skip_grant_tables: Start without access control.
        skip_networking: Start without a TCP listener.
        lock: Serialize start/stop with an advisory lock on the PID file.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    data_dir: Path | None = None
    pid_file: Path | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    socket: Path | None = None
    log_error: Path | None = None
    user: str | None = None
    output_file: Path | None = None
    skip_grant_tables: bool = False
    skip_networking: bool = False
    lock: bool = False


class ToolsConfig(BaseModel):
    """Explicit tool paths and extra search directories.

    Tools left unset are discovered on PATH, then in ``search_dirs``, then
    in the usual sbin directories.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    mysqld_safe: Path | None = None
    mysqld: Path | None = None
    mysql_install_db: Path | None = None
    mysqladmin: Path | None = None
    search_dirs: tuple[Path, ...] = ()


class PollConfig(BaseModel):
    """Liveness poll section, see PollPolicy."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(default=30, ge=1)
    interval: float = Field(default=1.0, ge=0)
    multiplier: float = Field(default=1.0, ge=1)
    max_interval: float = Field(default=30.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Log file. Uses ``<DBCTL_HOME>/logs/cli.log`` if unset.
        max_bytes: Rotate the log file at this size. 0 disables rotation.
        backup_count: Rotated log files to keep.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: Path | None = None
    max_bytes: int = Field(default=0, ge=0)
    backup_count: int = Field(default=3, ge=0)


def _validation_error(
    error: ValidationError,
    source: str | None,
) -> ConfigValidationError:
    """Convert the first Pydantic error into a ConfigValidationError."""
    details: ErrorDetails = error.errors()[0]
    key = ".".join(str(part) for part in details.get("loc", ()))
    message = str(details.get("msg", "Validation error"))
    where = f" in {source}" if source else ""
    return ConfigValidationError(
        f"Invalid value for '{key}'{where}: {message}",
        key=key,
        value=details.get("input"),
        expected=message,
        source=source,
    )


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods rather than the constructor so that defaults
    are merged and errors are reported as ConfigValidationError.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    server: ServerConfig = ServerConfig()
    tools: ToolsConfig = ToolsConfig()
    poll: PollConfig = PollConfig()
    logging: LoggingConfig = LoggingConfig()

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        source: str | None = None,
    ) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.
            source: Source name used in error messages.

        Returns:
            Configuration object.

        Raises:
            ConfigValidationError: If a value is invalid.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise _validation_error(e, source) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        config = cls.from_dict(data, source=str(path))
        config._sources = (
            ConfigSource(
                name=ConfigSourceName.PROJECT,
                path=path,
                exists=True,
                values=data,
            ),
        )
        return config

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged in precedence order
        (defaults -> user -> project -> env -> cli).

        Args:
            config_path: Explicit project config file. Uses ``./dbctl.toml``
                if None.
            include_env: Include DBCTL_ environment variables.
            cli_overrides: Values from command-line flags.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist.
            ConfigLoadError: If a config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        from dbctl.config._discovery import discover_sources  # noqa: PLC0415

        if config_path is not None and not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)

        sources = discover_sources(
            config_path=config_path,
            include_env=include_env,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded: list[ConfigSource] = []
        for source in reversed(sources):
            values = source.values
            if source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path is not None and source.exists:
                values = read_toml_file(source.path)

            loaded.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        config = cls.from_dict(merged)
        config._sources = tuple(reversed(loaded))
        return config

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed, highest precedence first."""
        return list(self._sources)

    def value_origins(self) -> dict[str, ConfigSourceName]:
        """Map each dotted key to the source that set its effective value.

        Keys no loaded source sets are absent; they hold model defaults.
        """
        origins: dict[str, ConfigSourceName] = {}
        for source in self._sources:
            if not source.exists:
                continue
            for key in flatten_keys(source.values):
                _ = origins.setdefault(key, source.name)
        return origins

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_handle(self) -> ProcessHandle:
        """Build the ProcessHandle for the configured server.

        Relative paths are resolved against the working directory.

        Returns:
            The process handle.

        Raises:
            ConfigValidationError: If server.data_dir is not set.
        """
        server = self.server
        if server.data_dir is None:
            msg = "server.data_dir is required"
            raise ConfigValidationError(
                msg,
                key="server.data_dir",
                value=None,
                expected="a data directory path",
            )

        data_dir = _absolute(server.data_dir)
        pid_file = (
            _absolute(server.pid_file)
            if server.pid_file is not None
            else data_dir / DEFAULT_PID_FILE_NAME
        )
        optional: dict[str, Any] = {}
        if server.user:
            optional["user"] = server.user

        return ProcessHandle(
            data_dir=data_dir,
            pid_file=pid_file,
            port=server.port,
            socket=_absolute(server.socket) if server.socket else None,
            log_error=_absolute(server.log_error) if server.log_error else None,
            skip_grant_tables=server.skip_grant_tables,
            skip_networking=server.skip_networking,
            **optional,
        )

    def to_policy(self) -> PollPolicy:
        """Build the liveness PollPolicy."""
        return PollPolicy(
            max_attempts=self.poll.max_attempts,
            interval=self.poll.interval,
            multiplier=self.poll.multiplier,
            max_interval=self.poll.max_interval,
        )

    def resolve_tools(self, *, search_path: str | None = None) -> ServerTools:
        """Resolve tool paths from explicit settings and discovery.

        Args:
            search_path: PATH-style string to search. Uses PATH if None.

        Returns:
            The resolved tools.

        Raises:
            ToolNotFoundError: If an explicit tool path is not executable.
        """
        overrides = {name: getattr(self.tools, name) for name in tool_names()}
        return discover_tools(
            search_path=search_path,
            extra_dirs=(*self.tools.search_dirs, *DEFAULT_SBIN_DIRS),
            overrides=overrides,
        )


def _absolute(path: Path) -> Path:
    return path.expanduser().absolute()
