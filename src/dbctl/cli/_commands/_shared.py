# pyright: reportExplicitAny=false
"""Exit codes, error reporting and output rendering for dbctl commands."""

from contextlib import contextmanager
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

import orjson
from pytablewriter import MarkdownTableWriter
from rich.console import Console
from rich.markup import escape

from dbctl.exceptions import (
    ConfigError,
    DbctlError,
    ExecutionError,
    LockError,
    PreconditionError,
    SignalDeliveryError,
    ToolNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from dbctl.cli._commands._context import CLIContext

__all__ = [
    "ExitCode",
    "exit_code_for",
    "exit_with_error",
    "finish",
    "handle_errors",
    "render_json",
    "render_table",
]


class ExitCode(IntEnum):
    """Exit statuses of dbctl commands.

    FAILURE means dbctl ran but the outcome was negative: the server was
    already running, did not stop in time, or a tool exited non-zero. The
    other error codes mean dbctl could not act at all.
    """

    SUCCESS = 0
    FAILURE = 1
    CONFIG_ERROR = 2
    PRECONDITION_ERROR = 3
    TOOL_NOT_FOUND = 4
    EXECUTION_ERROR = 5


_ERROR_EXIT_CODES: tuple[tuple[type[DbctlError], ExitCode], ...] = (
    (ConfigError, ExitCode.CONFIG_ERROR),
    (PreconditionError, ExitCode.PRECONDITION_ERROR),
    (LockError, ExitCode.PRECONDITION_ERROR),
    (ToolNotFoundError, ExitCode.TOOL_NOT_FOUND),
    (ExecutionError, ExitCode.EXECUTION_ERROR),
    (SignalDeliveryError, ExitCode.EXECUTION_ERROR),
)


def exit_code_for(error: DbctlError) -> ExitCode:
    """Return the exit code reported for a dbctl error."""
    for error_type, code in _ERROR_EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.FAILURE


@contextmanager
def handle_errors(ctx: CLIContext) -> Iterator[None]:
    """Report dbctl errors raised in the block and exit with the matching code."""
    try:
        yield
    except DbctlError as e:
        code = exit_code_for(e)
        ctx.logger.error("command_failed", error=str(e), exit_code=int(code))
        exit_with_error(str(e), code)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.FAILURE,
    *,
    console: Console | None = None,
) -> Never:
    """Print ``Error: <message>`` to stderr and exit.

    The message is printed literally; paths containing ``[...]`` are not
    read as rich markup.
    """
    if console is None:
        console = Console(stderr=True)
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


def finish(message: str = "", *, quiet: bool = False) -> Never:
    """Print a success message unless quiet, then exit with SUCCESS."""
    if message and not quiet:
        print(message)
    raise SystemExit(ExitCode.SUCCESS)


def render_json(data: Mapping[str, Any]) -> str:
    """Render data as indented JSON. Paths and other objects become strings."""
    return orjson.dumps(data, default=str, option=orjson.OPT_INDENT_2).decode()


def render_table(headers: list[str], rows: Iterable[Iterable[object]]) -> str:
    """Render rows as a Markdown table. None cells are left blank."""
    matrix = [["" if cell is None else str(cell) for cell in row] for row in rows]
    writer = MarkdownTableWriter(headers=headers, value_matrix=matrix, margin=1)
    return writer.dumps().rstrip()
