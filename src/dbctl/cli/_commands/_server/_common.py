"""Helpers shared by the server commands."""

import signal
import sys
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Never

from dbctl.cli._commands._shared import ExitCode, exit_with_error, finish
from dbctl.supervisor import CancellationToken, ServerSupervisor

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import FrameType

    from dbctl.cli._commands._context import CLIContext
    from dbctl.supervisor import SupervisorResult
    from dbctl.utils import CommandResult


def build_supervisor(ctx: CLIContext) -> ServerSupervisor:
    """Build a supervisor from the loaded configuration.

    Raises:
        ConfigValidationError: If server.data_dir is not configured.
        ToolNotFoundError: If a configured tool path is not executable.
    """
    config = ctx.config
    return ServerSupervisor(
        config.to_handle(),
        config.resolve_tools(),
        policy=config.to_policy(),
        lock=config.server.lock,
        output_file=config.server.output_file,
        logger=ctx.logger,
    )


@contextmanager
def cancel_on_interrupt() -> Iterator[CancellationToken]:
    """Yield a token that SIGINT cancels instead of raising KeyboardInterrupt.

    The previous handler is restored on exit. Off the main thread the token
    is only cancelled explicitly.
    """
    token = CancellationToken()
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def _handler(_signum: int, _frame: FrameType | None) -> None:
        token.cancel()

    previous = signal.getsignal(signal.SIGINT)
    _ = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        _ = signal.signal(signal.SIGINT, previous)


def with_pid(message: str, pid: int | None) -> str:
    return message if pid is None else f"{message} (pid {pid})"


def print_command_output(result: CommandResult, *, quiet: bool = False) -> None:
    """Echo captured output of a finished tool; stderr only when it failed."""
    if result.stdout and not quiet:
        print(result.stdout.rstrip())
    if result.stderr and not result.success:
        print(result.stderr.rstrip(), file=sys.stderr)


def finish_command(
    result: CommandResult, *, done: str, quiet: bool = False
) -> Never:
    """Exit after a one-shot tool run such as init or create-db."""
    print_command_output(result, quiet=quiet)
    if not result.success:
        exit_with_error(f"{result.program} exited with status {result.exit_code}")
    finish(done, quiet=quiet)


def report_result(
    result: SupervisorResult,
    *,
    done: str = "",
    quiet: bool = False,
) -> Never:
    """Print a supervisor result and exit with the matching code.

    Args:
        result: The orchestration outcome.
        done: Message printed when a successful result carries none.
        quiet: Print nothing on success.

    Raises:
        SystemExit: SUCCESS for a positive result, FAILURE otherwise.
    """
    if not result.success:
        exit_with_error(with_pid(result.message, result.pid), ExitCode.FAILURE)
    finish(with_pid(result.message or done, result.pid), quiet=quiet)
