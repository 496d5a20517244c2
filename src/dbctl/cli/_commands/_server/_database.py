# ruff: noqa: D415
"""Database administration commands."""

from typing import Annotated

from cyclopts import Parameter

from dbctl.cli._commands._context import CLIContext
from dbctl.cli._commands._shared import handle_errors

from ._common import build_supervisor, finish_command


def create_db(
    name: str,
    /,
    *,
    user: Annotated[
        str,
        Parameter(name=["--user", "-u"], help="Account used to connect"),
    ] = "root",
) -> None:
    """Create a database on the running server

    Args:
        name: Database name (letters, digits, _ and $).
        user: Account used to connect.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx):
        result = build_supervisor(ctx).create_database(name, user=user)

    finish_command(result, done=f"created database {name}", quiet=ctx.quiet)
