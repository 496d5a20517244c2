"""Liveness probing through the server's PID file.

The PID file is written and removed by the server itself. The prober only
reads it, then asks the operating system whether the recorded process still
exists. A missing or unreadable PID file counts as "down".
"""

import os
from typing import TYPE_CHECKING, final

import psutil

from ._models import Liveness

if TYPE_CHECKING:
    from pathlib import Path

    from ._protocol import ProcessProbe


def read_pid(pid_file: Path) -> int | None:
    """Read the process id recorded in a PID file.

    Only the first line is considered, with surrounding whitespace trimmed.

    Args:
        pid_file: Path to the PID file.

    Returns:
        The process id, or None if the file is absent, unreadable, or does
        not hold a positive integer.
    """
    try:
        content = pid_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    lines = content.splitlines()
    if not lines:
        return None

    text = lines[0].strip()
    # ASCII digits only: no sign, no underscores, no non-Latin numerals
    if not (text.isascii() and text.isdigit()):
        return None

    # 0 addresses the caller's process group for kill(2)
    pid = int(text)
    return pid if pid > 0 else None


@final
class SignalProbe:
    """POSIX probe that sends signal 0 to the process.

    Signal 0 performs error checking only: ESRCH means the process is gone,
    EPERM means it exists but belongs to someone else.
    """

    __slots__ = ()

    def exists(self, pid: int) -> Liveness:
        """Check whether a process with the given id exists."""
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return Liveness.STOPPED
        except PermissionError:
            return Liveness.RESTRICTED
        return Liveness.RUNNING


@final
class PsutilProbe:
    """Portable probe backed by the psutil process table.

    Zombie processes have exited and only wait to be reaped, so they are
    reported as stopped.
    """

    __slots__ = ()

    def exists(self, pid: int) -> Liveness:
        """Check whether a process with the given id exists."""
        try:
            status = psutil.Process(pid).status()
        except psutil.NoSuchProcess:
            return Liveness.STOPPED
        except psutil.AccessDenied:
            return Liveness.RESTRICTED
        if status == psutil.STATUS_ZOMBIE:
            return Liveness.STOPPED
        return Liveness.RUNNING


def default_probe() -> ProcessProbe:
    """Return the process probe for the current platform."""
    if os.name == "posix":
        return SignalProbe()
    return PsutilProbe()


@final
class LivenessProber:
    """Determines whether the server recorded in a PID file is running.

    The prober never verifies that the process is actually the server
    binary. A recycled pid belonging to an unrelated process reads as up.
    """

    __slots__ = ("_probe",)

    def __init__(self, probe: ProcessProbe | None = None) -> None:
        """Initialize the prober.

        Args:
            probe: Process existence primitive. Uses the platform default if None.
        """
        self._probe: ProcessProbe = probe if probe is not None else default_probe()

    @property
    def probe(self) -> ProcessProbe:
        """Return the process probe in use."""
        return self._probe

    def pid(self, pid_file: Path) -> int | None:
        """Return the pid recorded in the PID file, if any."""
        return read_pid(pid_file)

    def check(self, pid_file: Path) -> Liveness:
        """Probe the process recorded in the PID file.

        Args:
            pid_file: Path to the PID file.

        Returns:
            The liveness of the recorded process.
        """
        pid = read_pid(pid_file)
        if pid is None:
            return Liveness.STOPPED
        return self._probe.exists(pid)

    def is_up(self, pid_file: Path) -> bool:
        """Return True if the process recorded in the PID file exists."""
        return self.check(pid_file).is_up
