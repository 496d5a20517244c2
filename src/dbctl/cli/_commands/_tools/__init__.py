# ruff: noqa: D415
"""Tool discovery command."""

from typing import Annotated, Literal

from cyclopts import Parameter

from dbctl.cli._commands._context import CLIContext
from dbctl.cli._commands._shared import (
    ExitCode,
    handle_errors,
    render_json,
    render_table,
)

__all__ = ["tools"]


def tools(
    *,
    format: Annotated[  # noqa: A002
        Literal["table", "json"],
        Parameter(name=["--format", "-f"], help="Output format"),
    ] = "table",
) -> None:
    """List the server tools dbctl would run

    Tools set in the [tools] section are checked; the rest are looked up
    on PATH and in the usual sbin directories.

    Args:
        format: Output format.
    """
    ctx = CLIContext.current()
    with handle_errors(ctx):
        paths = ctx.config.resolve_tools().as_dict()

    if format == "json":
        print(render_json(paths))
    else:
        rows = [[name, path or "not found"] for name, path in paths.items()]
        print(render_table(["Tool", "Path"], rows))
    raise SystemExit(ExitCode.SUCCESS)
