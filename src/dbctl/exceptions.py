"""dbctl exceptions."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class DbctlError(Exception):
    """Base exception for dbctl errors."""


class ConfigError(DbctlError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and file location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when a configuration value fails validation.

    Attributes:
        key: Dot-notation path of the invalid key.
        value: The invalid value.
        expected: Description of what was expected.
        source: Name of the configuration source, if known.
    """

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        *,
        key: str,
        value: Any,  # noqa: ANN401  # pyright: ignore[reportExplicitAny, reportAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


class SupervisorError(DbctlError):
    """Base exception for server supervision errors."""


class PreconditionError(SupervisorError):
    """Raised when an operation's precondition does not hold.

    Precondition failures are detected before any subprocess is spawned and
    are never retried.

    Attributes:
        path: The filesystem path the precondition concerns, if any.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The path that violated the precondition.
        """
        super().__init__(message)
        self.path: Path | None = path


class ToolNotFoundError(SupervisorError):
    """Raised when a required external binary cannot be located.

    Attributes:
        tool: Name of the missing tool (e.g. ``mysqld_safe``).
        path: The configured path that was rejected, if one was given.
    """

    def __init__(
        self,
        message: str,
        *,
        tool: str,
        path: Path | None = None,
    ) -> None:
        """Initialize with error message and tool context.

        Args:
            message: Human-readable error message.
            tool: Name of the missing tool.
            path: The configured path that was rejected, if any.
        """
        super().__init__(message)
        self.tool: str = tool
        self.path: Path | None = path


class ExecutionError(SupervisorError):
    """Raised when an external command could not run to a normal exit.

    Covers launch failures (binary missing, permission denied), termination
    by a signal and timeouts. A command that ran and exited non-zero is not an
    ExecutionError; see ``CommandResult.success``.

    Attributes:
        command: The argument vector that was executed.
        signal: Signal number that terminated the command, if any.
        timed_out: Whether the command was killed after a timeout.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        signal: int | None = None,
        timed_out: bool = False,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and command context.

        Args:
            message: Human-readable error message.
            command: The argument vector that was executed.
            signal: Signal number that terminated the command.
            timed_out: Whether the command timed out.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.command: tuple[str, ...] = tuple(command)
        self.signal: int | None = signal
        self.timed_out: bool = timed_out
        self.cause: Exception | None = cause


class SignalDeliveryError(SupervisorError):
    """Raised when a termination signal cannot be delivered to the server.

    Attributes:
        pid: The process id the signal was sent to.
        signal: The signal number.
        cause: The underlying OS error.
    """

    def __init__(
        self,
        message: str,
        *,
        pid: int,
        signal: int,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and signal context."""
        super().__init__(message)
        self.pid: int = pid
        self.signal: int = signal
        self.cause: Exception | None = cause


class LockError(SupervisorError):
    """Raised when the advisory lock on the PID file cannot be acquired.

    Attributes:
        path: Path of the lock file.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and lock file context."""
        super().__init__(message)
        self.path: Path | None = path
