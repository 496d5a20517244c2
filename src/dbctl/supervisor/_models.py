"""Data models for the supervisor system.

This module defines the core data types for server supervision:
- ErrorSink: Where the server sends its error log
- Liveness: Tri-state result of a liveness probe
- ProcessHandle: Identity and options of a supervised server instance
- SupervisorResult: Outcome of a start/stop/status orchestration
"""

import getpass
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations
from typing import Self

MAX_PORT = 65535


class ErrorSink(StrEnum):
    """Error log destination policy for the server.

    Exactly one policy is active for a handle:
    - FILE: errors are written to ``ProcessHandle.log_error``
    - SYSLOG: errors are sent to syslog
    """

    FILE = "file"
    SYSLOG = "syslog"


class Liveness(StrEnum):
    """Result of probing a process id.

    - RUNNING: A process with the recorded pid exists
    - STOPPED: No PID file, unparsable content, or no such process
    - RESTRICTED: The process exists but the caller may not inspect it
    """

    RUNNING = "running"
    STOPPED = "stopped"
    RESTRICTED = "restricted"

    @property
    def is_up(self) -> bool:
        """Return True if a process exists, whether or not it is inspectable."""
        return self is not Liveness.STOPPED


def _current_user() -> str:
    return getpass.getuser()


@dataclass(frozen=True, slots=True)
class ProcessHandle:
    """Identifies a supervised server instance.

    Attributes:
        data_dir: Root of the server's data directory.
        pid_file: Path of the PID file written by the server.
        port: TCP port to listen on, if any.
        socket: Path of the UNIX domain socket, if any.
        log_error: Error log path. When unset, errors go to syslog.
        user: OS user the server runs as. Defaults to the current user.
        skip_grant_tables: Start the server without access control.
        skip_networking: Start the server without a TCP listener.
    """

    data_dir: Path
    pid_file: Path
    port: int | None = None
    socket: Path | None = None
    log_error: Path | None = None
    user: str = field(default_factory=_current_user)
    skip_grant_tables: bool = False
    skip_networking: bool = False

    def __post_init__(self) -> None:
        if self.port is not None and not 0 < self.port <= MAX_PORT:
            msg = f"port must be between 1 and {MAX_PORT}, got {self.port}"
            raise ValueError(msg)

    @property
    def error_sink(self) -> ErrorSink:
        """Return the active error log policy."""
        return ErrorSink.FILE if self.log_error is not None else ErrorSink.SYSLOG


@dataclass(frozen=True, slots=True)
class SupervisorResult:
    """Immutable outcome of a supervisor orchestration.

    Negative outcomes such as "server is already running" are expected and
    recoverable, so they are reported here instead of being raised. Callers
    must check ``success``.

    Attributes:
        success: Whether the orchestration reached its goal.
        message: Human-readable explanation, empty on plain success.
        pid: Process id of the server when known.
        cancelled: Whether polling was aborted by a cancellation token.
    """

    success: bool
    message: str = ""
    pid: int | None = None
    cancelled: bool = False

    @classmethod
    def ok(cls, message: str = "", *, pid: int | None = None) -> Self:
        """Build a successful result."""
        return cls(success=True, message=message, pid=pid)

    @classmethod
    def fail(cls, message: str, *, pid: int | None = None) -> Self:
        """Build an unsuccessful result."""
        return cls(success=False, message=message, pid=pid)
