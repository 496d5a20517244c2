"""dbctl CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._config import config
from ._context import CLIContext
from ._server import create_db, init, start, status, stop
from ._shared import ExitCode, exit_code_for, exit_with_error, handle_errors
from ._tools import tools

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "config",
    "create_db",
    "exit_code_for",
    "exit_with_error",
    "handle_errors",
    "init",
    "register_commands",
    "start",
    "status",
    "stop",
    "tools",
]


def register_commands(app: App) -> None:
    app.command(init, name="init")
    app.command(start, name="start")
    app.command(stop, name="stop")
    app.command(status, name="status")
    app.command(create_db, name="create-db")
    app.command(tools, name="tools")
    app.command(config, name="config")
