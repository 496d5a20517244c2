"""Advisory lock serializing start/stop on one PID file.

Start and stop are check-then-act sequences. Two callers racing on the same
PID file can both see the server as down and spawn two servers. Holding an
exclusive ``flock`` on ``<pid_file>.lock`` for the whole orchestration closes
that window for cooperating callers.
"""

import os
import sys
from typing import IO, TYPE_CHECKING, Self, final

from dbctl.exceptions import LockError

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

if sys.platform != "win32":
    import fcntl


def lock_path_for(pid_file: Path) -> Path:
    """Return the lock file path guarding a PID file."""
    return pid_file.with_name(f"{pid_file.name}.lock")


@final
class PidFileLock:
    """Exclusive, non-blocking advisory lock next to a PID file.

    Example:
        >>> with PidFileLock(Path("/tmp/mysql.pid")):
        ...     pass  # start or stop the server
    """

    __slots__ = ("_file", "path")

    def __init__(self, pid_file: Path) -> None:
        self.path: Path = lock_path_for(pid_file)
        self._file: IO[str] | None = None

    @property
    def locked(self) -> bool:
        """Return True while the lock is held by this instance."""
        return self._file is not None

    def acquire(self) -> None:
        """Acquire the lock without blocking.

        Raises:
            LockError: If the lock is held elsewhere, cannot be created, or
                advisory locks are unsupported on this platform.
        """
        if self._file is not None:
            return
        if sys.platform == "win32":
            msg = "advisory file locks are not supported on this platform"
            raise LockError(msg, path=self.path)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handle = self.path.open("a", encoding="utf-8")
        except OSError as e:
            msg = f"cannot open lock file {self.path}: {e}"
            raise LockError(msg, path=self.path) from e

        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            handle.close()
            msg = f"another caller holds {self.path}"
            raise LockError(msg, path=self.path) from e
        except OSError as e:
            handle.close()
            msg = f"cannot lock {self.path}: {e}"
            raise LockError(msg, path=self.path) from e

        handle.seek(0)
        handle.truncate()
        _ = handle.write(f"{os.getpid()}\n")
        handle.flush()
        self._file = handle

    def release(self) -> None:
        """Release the lock. Safe to call when not held."""
        if self._file is None:
            return
        try:
            if sys.platform != "win32":
                fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
        finally:
            self._file.close()
            self._file = None

    def __enter__(self) -> Self:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()
