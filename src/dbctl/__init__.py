"""dbctl: control a MySQL-compatible server through its command-line tools."""

from dbctl.exceptions import (
    ConfigError,
    DbctlError,
    ExecutionError,
    LockError,
    PreconditionError,
    SignalDeliveryError,
    SupervisorError,
    ToolNotFoundError,
)
from dbctl.supervisor import (
    CancellationToken,
    Liveness,
    PollPolicy,
    ProcessHandle,
    ServerSupervisor,
    SupervisorResult,
)
from dbctl.utils import CommandResult, ServerTools, discover_tools, run_command

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "CommandResult",
    "ConfigError",
    "DbctlError",
    "ExecutionError",
    "Liveness",
    "LockError",
    "PollPolicy",
    "PreconditionError",
    "ProcessHandle",
    "ServerSupervisor",
    "ServerTools",
    "SignalDeliveryError",
    "SupervisorError",
    "SupervisorResult",
    "ToolNotFoundError",
    "__version__",
    "discover_tools",
    "run_command",
]
