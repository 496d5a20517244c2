"""Supervisor package for controlling a database server process.

This package starts, stops and inspects a server whose only liveness signal
is the PID file it writes, and runs one-shot administrative commands
against it.

Key Components:
    - ProcessHandle: Identity and options of a server instance
    - SupervisorResult: Outcome of start/stop/status orchestrations
    - Liveness: Tri-state probe result (running, stopped, restricted)
    - LivenessProber: PID file reader plus process existence probe
    - SignalProbe / PsutilProbe: Platform process existence primitives
    - PollPolicy: Bounded liveness poll with optional backoff
    - CancellationToken: Aborts a liveness poll from another thread
    - PidFileLock: Optional advisory lock serializing start/stop
    - ServerSupervisor: Lifecycle controller for one instance

Example:
    >>> from pathlib import Path
    >>> from dbctl.supervisor import ProcessHandle, ServerSupervisor
    >>> from dbctl.utils import discover_tools
    >>> handle = ProcessHandle(
    ...     data_dir=Path("/tmp/mysqlroot/data"),
    ...     pid_file=Path("/tmp/mysqlroot/mysql.pid"),
    ... )
    >>> supervisor = ServerSupervisor(handle, discover_tools())
    >>> supervisor.init()
    >>> result = supervisor.start()
    >>> result.success
    True
"""

from ._lock import PidFileLock, lock_path_for
from ._models import ErrorSink, Liveness, ProcessHandle, SupervisorResult
from ._policy import CancellationToken, PollPolicy
from ._probe import (
    LivenessProber,
    PsutilProbe,
    SignalProbe,
    default_probe,
    read_pid,
)
from ._protocol import ProcessProbe
from ._supervisor import (
    MSG_ALREADY_RUNNING,
    MSG_CANCELLED,
    MSG_DID_NOT_START,
    MSG_DID_NOT_STOP,
    MSG_NOT_RUNNING,
    MSG_RUNNING,
    ServerSupervisor,
)

__all__ = [
    "MSG_ALREADY_RUNNING",
    "MSG_CANCELLED",
    "MSG_DID_NOT_START",
    "MSG_DID_NOT_STOP",
    "MSG_NOT_RUNNING",
    "MSG_RUNNING",
    "CancellationToken",
    "ErrorSink",
    "Liveness",
    "LivenessProber",
    "PidFileLock",
    "PollPolicy",
    "ProcessHandle",
    "ProcessProbe",
    "PsutilProbe",
    "ServerSupervisor",
    "SignalProbe",
    "SupervisorResult",
    "default_probe",
    "lock_path_for",
    "read_pid",
]
