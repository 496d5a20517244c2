"""Server supervisor for a PID-file managed database server.

This module provides the ServerSupervisor class that initializes, starts,
stops and inspects one server instance through its command-line tools.
Start and stop are bounded liveness polls around a single spawn or signal;
only the poll is retried, never the spawn or signal itself.
"""

import os
import signal
import time
from contextlib import nullcontext
from enum import Enum
from typing import TYPE_CHECKING, final

from dbctl.exceptions import PreconditionError, SignalDeliveryError
from dbctl.utils import (
    create_null_logger,
    is_valid_database_name,
    run_command,
    spawn_detached,
)

from ._lock import PidFileLock
from ._models import ErrorSink, Liveness, ProcessHandle, SupervisorResult
from ._policy import CancellationToken, PollPolicy
from ._probe import LivenessProber

if TYPE_CHECKING:
    import subprocess
    from contextlib import AbstractContextManager
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from dbctl.utils import CommandResult, ServerTools

MSG_ALREADY_RUNNING = "server is already running"
MSG_NOT_RUNNING = "server is not running"
MSG_RUNNING = "server is running"
MSG_DID_NOT_START = "server did not start"
MSG_DID_NOT_STOP = "server did not stop"
MSG_CANCELLED = "cancelled"


class _PollOutcome(Enum):
    REACHED = "reached"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@final
class ServerSupervisor:
    """Controls the lifecycle of one database server instance.

    The supervisor holds no state about the server beyond an optional handle
    on the process it spawned. Liveness is always re-derived from the PID
    file, which the server writes and removes itself.

    Start and stop are check-then-act sequences. Without ``lock=True``
    concurrent callers on the same PID file can race and spawn two servers;
    use one supervisor per data directory from one thread of control.

    Attributes:
        handle: Identity and options of the supervised instance.
        tools: Resolved paths of the server's command-line tools.
        policy: Liveness poll policy for start and stop.
    """

    __slots__ = (
        "_lock",
        "_log",
        "_output_file",
        "_process",
        "_prober",
        "handle",
        "policy",
        "tools",
    )

    def __init__(  # noqa: PLR0913
        self,
        handle: ProcessHandle,
        tools: ServerTools,
        *,
        policy: PollPolicy | None = None,
        prober: LivenessProber | None = None,
        lock: bool = False,
        output_file: Path | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            handle: The server instance to supervise.
            tools: Resolved tool paths, see ``discover_tools``.
            policy: Liveness poll policy. Uses 30 polls one second apart if None.
            prober: Liveness prober. Uses the platform default probe if None.
            lock: Serialize start and stop with an advisory lock on the PID file.
            output_file: File receiving the spawned server's stdout and stderr.
                Output is discarded if None.
            logger: Structured logger. Events are discarded if None.
        """
        self.handle = handle
        self.tools = tools
        self.policy = policy if policy is not None else PollPolicy()
        self._prober = prober if prober is not None else LivenessProber()
        self._lock = PidFileLock(handle.pid_file) if lock else None
        self._output_file = output_file
        self._process: subprocess.Popen[bytes] | None = None
        base_logger = logger if logger is not None else create_null_logger()
        self._log: FilteringBoundLogger = base_logger.bind(
            data_dir=str(handle.data_dir),
            pid_file=str(handle.pid_file),
        )

    # -------------------------------------------------------------------------
    # Liveness
    # -------------------------------------------------------------------------

    def liveness(self) -> Liveness:
        """Probe the process recorded in the PID file."""
        return self._prober.check(self.handle.pid_file)

    def is_up(self) -> bool:
        """Return True if the server recorded in the PID file is running."""
        return self._prober.is_up(self.handle.pid_file)

    def pid(self) -> int | None:
        """Return the pid recorded in the PID file, if any."""
        return self._prober.pid(self.handle.pid_file)

    # -------------------------------------------------------------------------
    # Arguments
    # -------------------------------------------------------------------------

    def server_arguments(self) -> list[str]:
        """Build the argument list for the server start wrapper."""
        handle = self.handle
        args = [
            f"--datadir={handle.data_dir}",
            f"--pid-file={handle.pid_file}",
        ]
        if handle.error_sink is ErrorSink.FILE:
            args.append(f"--log-error={handle.log_error}")
        else:
            args.append("--syslog")
        if handle.port is not None:
            args.append(f"--port={handle.port}")
        if handle.socket is not None:
            args.append(f"--socket={handle.socket}")
        if handle.skip_grant_tables:
            args.append("--skip-grant-tables")
        if handle.skip_networking:
            args.append("--skip-networking")
        return args

    def init_command(self) -> tuple[Path, list[str]]:
        """Choose the data directory initialization tool and its arguments.

        Prefers mysql_install_db and falls back to ``mysqld --initialize-insecure``.

        Returns:
            Tuple of (executable, arguments).

        Raises:
            ToolNotFoundError: If neither tool is available.
        """
        handle = self.handle
        common = [f"--datadir={handle.data_dir}", f"--user={handle.user}"]
        if self.tools.mysql_install_db is not None:
            return self.tools.mysql_install_db, common
        mysqld = self.tools.require("mysqld")
        return mysqld, ["--initialize-insecure", *common]

    def admin_connection_arguments(self, user: str) -> list[str]:
        """Build the connection arguments for mysqladmin."""
        handle = self.handle
        args = [f"--user={user}"]
        if handle.socket is not None:
            args.append(f"--socket={handle.socket}")
        elif handle.port is not None:
            args.extend(["--protocol=tcp", "--host=127.0.0.1", f"--port={handle.port}"])
        return args

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def init(self) -> CommandResult:
        """Initialize an empty data directory.

        The data directory is created if it does not exist. This is a
        precondition check, not a race-free guarantee: files created after
        the check are not detected.

        Returns:
            The result of the initialization command. A non-zero exit is
            returned, not raised.

        Raises:
            PreconditionError: If the data directory is not empty.
            ToolNotFoundError: If no initialization tool is available.
            ExecutionError: If the tool cannot be launched or is killed.
        """
        data_dir = self.handle.data_dir
        if data_dir.exists():
            if not data_dir.is_dir():
                msg = f"{data_dir} is not a directory"
                raise PreconditionError(msg, path=data_dir)
            if any(data_dir.iterdir()):
                msg = f"{data_dir} is not empty"
                raise PreconditionError(msg, path=data_dir)

        executable, args = self.init_command()
        data_dir.mkdir(parents=True, exist_ok=True)

        self._log.info("data_dir_init_requested", tool=str(executable))
        result = run_command(executable, *args, logger=self._log)
        if result.success:
            self._log.info("data_dir_initialized")
        else:
            self._log.warning("data_dir_init_failed", exit_code=result.exit_code)
        return result

    def start(self, cancel: CancellationToken | None = None) -> SupervisorResult:
        """Start the server and wait until it reports up.

        Args:
            cancel: Token that aborts the wait early. The spawned process is
                left running when the wait is cancelled.

        Returns:
            Success once the PID file names a live process. Unsuccessful
            with "server is already running" when nothing was spawned, or
            "server did not start" when the poll budget ran out.

        Raises:
            ToolNotFoundError: If mysqld_safe is not available.
            ExecutionError: If the server cannot be launched.
            LockError: If locking is enabled and another caller holds the lock.
        """
        with self._serialized():
            if self.is_up():
                self._log.info("server_already_running", pid=self.pid())
                return SupervisorResult.fail(MSG_ALREADY_RUNNING, pid=self.pid())

            executable = self.tools.require("mysqld_safe")
            self._log.info("server_start_requested", tool=str(executable))
            self._process = spawn_detached(
                executable,
                *self.server_arguments(),
                log_file=self._output_file,
                logger=self._log,
            )
            self._log.debug("server_spawned", wrapper_pid=self._process.pid)

            outcome = self._poll(want_up=True, cancel=cancel)

        if outcome is _PollOutcome.CANCELLED:
            return SupervisorResult(success=False, message=MSG_CANCELLED, cancelled=True)
        if outcome is _PollOutcome.EXHAUSTED:
            self._log.warning("server_start_timeout", attempts=self.policy.max_attempts)
            return SupervisorResult.fail(MSG_DID_NOT_START)

        pid = self.pid()
        self._log.info("server_started", pid=pid)
        return SupervisorResult.ok(pid=pid)

    def stop(self, cancel: CancellationToken | None = None) -> SupervisorResult:
        """Ask the server to shut down and wait until it is gone.

        Sends SIGTERM once to the pid recorded in the PID file.

        Args:
            cancel: Token that aborts the wait early. The signal has
                already been sent when the wait is cancelled.

        Returns:
            Success once the recorded process no longer exists. Unsuccessful
            with "server is not running" when no signal was sent, or "server
            did not stop" when the poll budget ran out.

        Raises:
            SignalDeliveryError: If the signal cannot be delivered.
            LockError: If locking is enabled and another caller holds the lock.
        """
        with self._serialized():
            pid = self.pid()
            if pid is None or not self._prober.probe.exists(pid).is_up:
                self._log.info("server_not_running")
                return SupervisorResult.fail(MSG_NOT_RUNNING)

            self._log.info("server_stop_requested", pid=pid)
            self._send_signal(pid, signal.SIGTERM)

            outcome = self._poll(want_up=False, cancel=cancel)

        if outcome is _PollOutcome.CANCELLED:
            return SupervisorResult(
                success=False, message=MSG_CANCELLED, pid=pid, cancelled=True
            )
        if outcome is _PollOutcome.EXHAUSTED:
            self._log.warning("server_stop_timeout", pid=pid)
            return SupervisorResult.fail(MSG_DID_NOT_STOP, pid=pid)

        self._log.info("server_stopped", pid=pid)
        return SupervisorResult.ok(pid=pid)

    def status(self) -> SupervisorResult:
        """Report whether the server is running.

        Returns:
            Success with "server is running" and the pid, or unsuccessful
            with "server is not running".
        """
        self._reap()
        liveness = self.liveness()
        if liveness.is_up:
            return SupervisorResult.ok(MSG_RUNNING, pid=self.pid())
        return SupervisorResult.fail(MSG_NOT_RUNNING)

    def create_database(self, name: str, *, user: str = "root") -> CommandResult:
        """Create a database on the running server with mysqladmin.

        Args:
            name: Database name, an unquoted identifier.
            user: Account used to connect.

        Returns:
            The mysqladmin result. A non-zero exit is returned, not raised.

        Raises:
            PreconditionError: If the name is invalid or the server is down.
            ToolNotFoundError: If mysqladmin is not available.
            ExecutionError: If mysqladmin cannot be launched or is killed.
        """
        if not is_valid_database_name(name):
            msg = f"invalid database name {name!r}"
            raise PreconditionError(msg)
        if not self.is_up():
            raise PreconditionError(MSG_NOT_RUNNING, path=self.handle.pid_file)

        mysqladmin = self.tools.require("mysqladmin")
        args = [*self.admin_connection_arguments(user), "create", name]
        self._log.info("database_create_requested", database=name)
        return run_command(mysqladmin, *args, logger=self._log)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _serialized(self) -> AbstractContextManager[object]:
        if self._lock is None:
            return nullcontext()
        return self._lock

    def _send_signal(self, pid: int, signum: signal.Signals) -> None:
        try:
            os.kill(pid, signum)
        except ProcessLookupError as e:
            msg = f"server process {pid} no longer exists"
            raise SignalDeliveryError(msg, pid=pid, signal=signum, cause=e) from e
        except PermissionError as e:
            msg = f"not permitted to signal server process {pid}"
            raise SignalDeliveryError(msg, pid=pid, signal=signum, cause=e) from e
        except OSError as e:
            msg = f"failed to signal server process {pid}: {e}"
            raise SignalDeliveryError(msg, pid=pid, signal=signum, cause=e) from e
        self._log.debug("server_signalled", pid=pid, signal=signum.name)

    def _reap(self) -> None:
        """Collect the spawned wrapper if it has exited."""
        if self._process is None:
            return
        returncode = self._process.poll()
        if returncode is not None:
            self._log.debug(
                "server_wrapper_exited",
                wrapper_pid=self._process.pid,
                returncode=returncode,
            )
            self._process = None

    def _poll(
        self,
        *,
        want_up: bool,
        cancel: CancellationToken | None,
    ) -> _PollOutcome:
        for attempt in range(self.policy.max_attempts):
            self._reap()
            if self.is_up() is want_up:
                return _PollOutcome.REACHED

            delay = self.policy.delay(attempt)
            if cancel is None:
                time.sleep(delay)
            elif cancel.cancelled or cancel.wait(delay):
                self._log.info("poll_cancelled", attempt=attempt)
                return _PollOutcome.CANCELLED

        self._reap()
        if self.is_up() is want_up:
            return _PollOutcome.REACHED
        return _PollOutcome.EXHAUSTED
