# ruff: noqa: D415
"""Configuration inspection command."""

from typing import Annotated, Literal

from cyclopts import Parameter

from dbctl.cli._commands._context import CLIContext
from dbctl.cli._commands._shared import ExitCode, render_json, render_table
from dbctl.config import flatten_keys

__all__ = ["config"]

# Label for keys that keep the model default
_MODEL_DEFAULT = "default"


def config(
    *,
    format: Annotated[  # noqa: A002
        Literal["table", "json"],
        Parameter(name=["--format", "-f"], help="Output format"),
    ] = "table",
) -> None:
    """Show the effective configuration and where each value came from

    Sources in precedence order: command-line flags, DBCTL_ environment
    variables, ./dbctl.toml or --config, the user config file, defaults.
    Exits 1 when a broken config file was ignored.

    Args:
        format: Output format.
    """
    ctx = CLIContext.current()
    values = ctx.config.to_dict()
    origins = {key: name.value for key, name in ctx.config.value_origins().items()}

    if format == "json":
        print(
            render_json(
                {
                    "values": values,
                    "origins": origins,
                    "sources": [
                        {"name": s.name, "path": s.path, "exists": s.exists}
                        for s in ctx.config.sources
                    ],
                    "error": ctx.config_error,
                }
            )
        )
    else:
        rows = [
            [key, value, origins.get(key, _MODEL_DEFAULT)]
            for key, value in flatten_keys(values).items()
        ]
        print(render_table(["Key", "Value", "Source"], rows))

    raise SystemExit(ExitCode.FAILURE if ctx.config_error else ExitCode.SUCCESS)
