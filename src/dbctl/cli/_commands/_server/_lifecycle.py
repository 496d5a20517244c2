# ruff: noqa: D415
"""Server lifecycle commands: init, start, stop and status."""

from typing import Annotated, Literal

from cyclopts import Parameter

from dbctl.cli._commands._context import CLIContext
from dbctl.cli._commands._shared import ExitCode, handle_errors, render_json

from ._common import (
    build_supervisor,
    cancel_on_interrupt,
    finish_command,
    report_result,
    with_pid,
)


def init() -> None:
    """Initialize an empty data directory

    Runs mysql_install_db, or mysqld --initialize-insecure when
    mysql_install_db is not installed. The data directory must be empty
    or absent.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx):
        supervisor = build_supervisor(ctx)
        result = supervisor.init()

    finish_command(
        result,
        done=f"initialized {supervisor.handle.data_dir}",
        quiet=ctx.quiet,
    )


def start() -> None:
    """Start the server and wait until it is up

    Does nothing and exits 1 when the server is already running.
    Ctrl-C stops waiting but leaves the server starting.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx), cancel_on_interrupt() as token:
        result = build_supervisor(ctx).start(token)
    report_result(result, done="server started", quiet=ctx.quiet)


def stop() -> None:
    """Stop the server and wait until it is gone

    Does nothing and exits 1 when the server is not running.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx), cancel_on_interrupt() as token:
        result = build_supervisor(ctx).stop(token)
    report_result(result, done="server stopped", quiet=ctx.quiet)


def status(
    *,
    format: Annotated[  # noqa: A002
        Literal["text", "json"],
        Parameter(name=["--format", "-f"], help="Output format"),
    ] = "text",
) -> None:
    """Show whether the server is running

    Exits 0 when the server is running and 1 when it is not.

    Args:
        format: Output format.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx):
        supervisor = build_supervisor(ctx)
        result = supervisor.status()
        liveness = supervisor.liveness()

    if format == "json":
        print(
            render_json(
                {
                    "running": result.success,
                    "liveness": liveness,
                    "pid": result.pid,
                    "data_dir": supervisor.handle.data_dir,
                    "pid_file": supervisor.handle.pid_file,
                }
            )
        )
    else:
        print(with_pid(result.message, result.pid))

    raise SystemExit(ExitCode.SUCCESS if result.success else ExitCode.FAILURE)
