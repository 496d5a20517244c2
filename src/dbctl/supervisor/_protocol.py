"""Protocol definitions for the supervisor system.

This module defines the interface that decouples the liveness prober from
the platform's process-existence primitive:
- ProcessProbe: Protocol for checking whether a process id is alive
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import Liveness


@runtime_checkable
class ProcessProbe(Protocol):
    """Protocol for checking OS-level process existence.

    Implementations wrap one platform primitive (a zero signal, the process
    table) and map its answer onto the Liveness tri-state.
    """

    def exists(self, pid: int) -> Liveness:
        """Check whether a process with the given id exists.

        Args:
            pid: The process id to check.

        Returns:
            RUNNING if it exists, STOPPED if not, RESTRICTED if the
            caller may not inspect it.
        """
        ...
