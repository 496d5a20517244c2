"""Execution utilities for external server tools.

This module provides the two ways dbctl invokes external binaries:
one-shot commands that run to completion with captured output, and
detached spawns for long-running server processes.
"""

import os
import signal
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dbctl.exceptions import ExecutionError

from ._logging import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

# Maximum output size in bytes kept in log entries
MAX_LOGGED_OUTPUT_BYTES: int = 4096


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a one-shot command that ran to a normal exit.

    A non-zero exit is still a CommandResult; callers decide whether it
    is fatal. Commands killed by a signal raise ExecutionError instead.

    Attributes:
        command: The argument vector that was executed.
        stdout: Captured standard output.
        stderr: Captured standard error.
        exit_code: Process exit status.
    """

    command: tuple[str, ...]
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def success(self) -> bool:
        """Return True if the command exited with status 0."""
        return self.exit_code == 0

    @property
    def program(self) -> str:
        """Return the executable's file name, such as ``mysqladmin``."""
        return os.path.basename(self.command[0]) if self.command else ""


def truncate_output(output: str, max_bytes: int = MAX_LOGGED_OUTPUT_BYTES) -> str:
    """Truncate output to max bytes, preserving valid UTF-8.

    Args:
        output: The string to truncate.
        max_bytes: Maximum size in bytes.

    Returns:
        Truncated string with indicator if truncated.
    """
    if not output:
        return output

    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output

    # Drop any incomplete multi-byte sequence left at the cut
    truncated = encoded[:max_bytes].decode("utf-8", errors="ignore")

    return truncated + "\n... [output truncated]"


def build_command(path: str | Path, args: tuple[object, ...]) -> tuple[str, ...]:
    """Build an argument vector, coercing every element to ``str``."""
    return (str(path), *(str(arg) for arg in args))


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


def run_command(  # noqa: PLR0913
    path: str | Path,
    *args: object,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    logger: FilteringBoundLogger | None = None,
) -> CommandResult:
    """Execute an external command to completion.

    Blocks until the child exits, capturing stdout and stderr separately.

    Args:
        path: Executable to run.
        *args: Arguments, converted with ``str()``.
        cwd: Working directory for the command.
        env: Additional environment variables.
        timeout: Seconds to wait before killing the command.
        logger: Structured logger for command events.

    Returns:
        CommandResult with the exit status and captured output.

    Raises:
        ExecutionError: If the command cannot be launched, times out, or is
            killed by a signal.
    """
    log = logger if logger is not None else create_null_logger()
    command = build_command(path, args)
    full_env = {**os.environ, **env} if env else None

    log.debug("command_started", command=list(command))

    try:
        completed = subprocess.run(  # noqa: S603
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        msg = f"command {' '.join(command)} timed out after {timeout}s"
        raise ExecutionError(msg, command=command, timed_out=True, cause=e) from e
    except OSError as e:
        msg = f"failed to execute {' '.join(command)}: {e}"
        raise ExecutionError(msg, command=command, cause=e) from e

    stdout = completed.stdout.decode("utf-8", errors="replace")
    stderr = completed.stderr.decode("utf-8", errors="replace")

    if completed.returncode < 0:
        signum = -completed.returncode
        log.warning(
            "command_killed",
            command=list(command),
            signal=_signal_name(signum),
            stderr=truncate_output(stderr),
        )
        msg = f"command {' '.join(command)} killed by signal {_signal_name(signum)}"
        raise ExecutionError(msg, command=command, signal=signum)

    log.debug(
        "command_finished",
        command=list(command),
        exit_code=completed.returncode,
        stderr=truncate_output(stderr),
    )

    return CommandResult(
        command=command,
        stdout=stdout,
        stderr=stderr,
        exit_code=completed.returncode,
    )


def spawn_detached(
    path: str | Path,
    *args: object,
    log_file: Path | None = None,
    logger: FilteringBoundLogger | None = None,
) -> subprocess.Popen[bytes]:
    """Start a background process that outlives the caller's session.

    The child gets its own session, reads from ``/dev/null`` and writes
    to ``/dev/null`` or, when given, appends to ``log_file``. This function
    does not wait for the child.

    Args:
        path: Executable to run.
        *args: Arguments, converted with ``str()``.
        log_file: File receiving the child's stdout and stderr.
        logger: Structured logger for spawn events.

    Returns:
        The Popen handle, which the caller may poll to reap the child.

    Raises:
        ExecutionError: If the process cannot be launched.
    """
    log = logger if logger is not None else create_null_logger()
    command = build_command(path, args)

    try:
        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            with log_file.open("ab") as output:
                process = subprocess.Popen(  # noqa: S603
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=output,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                )
        else:
            process = subprocess.Popen(  # noqa: S603
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except OSError as e:
        msg = f"failed to execute {' '.join(command)}: {e}"
        raise ExecutionError(msg, command=command, cause=e) from e

    log.debug("process_spawned", command=list(command), pid=process.pid)
    return process
