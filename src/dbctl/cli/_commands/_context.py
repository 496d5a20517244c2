# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""State of the running dbctl invocation.

The meta launcher loads configuration and builds the logger once, then
activates a CLIContext for the duration of the command. Commands read it
with ``CLIContext.current()``.
"""

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from dbctl.config import Config
from dbctl.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import FilteringBoundLogger

_active_context: contextvars.ContextVar[CLIContext | None] = contextvars.ContextVar(
    "dbctl_cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Configuration and global flags of one dbctl invocation.

    Attributes:
        config: Effective configuration.
        quiet: Suppress success messages and tool output.
        config_path: File given with --config, if any.
        config_error: Why configuration fell back to the defaults, if it did.
        logger: Logger with the command name bound.
    """

    config: Config = field(repr=False)
    quiet: bool = False
    config_path: Path | None = None
    config_error: str | None = None
    logger: FilteringBoundLogger = field(
        default_factory=create_null_logger, repr=False
    )

    @classmethod
    def current(cls) -> CLIContext:
        """Return the active context, or one holding the default configuration."""
        ctx = _active_context.get()
        if ctx is None:
            return cls(config=Config.from_dict({}))
        return ctx

    @contextmanager
    def activate(self) -> Iterator[CLIContext]:
        """Make this the active context until the block exits."""
        token = _active_context.set(self)
        try:
            yield self
        finally:
            _active_context.reset(token)
