"""The command-line interface for dbctl."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from dbctl.config import ConfigError, safe_load_config
from dbctl.utils import create_file_logger, get_dbctl_cli_log_file

from ._commands import register_commands
from ._commands._context import CLIContext
from ._commands._shared import ExitCode, exit_with_error

APP_NAME = "dbctl"
APP_HELP = "Initialize, start and stop a MySQL-compatible database server."


def _run_with_context(
    app: App,
    tokens: tuple[str, ...],
    *,
    verbose: bool,
    quiet: bool,
    config: Path | None,
) -> None:
    cli_overrides = {"logging": {"level": "debug"}} if verbose else None
    try:
        loaded, config_error = safe_load_config(
            config_path=config,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, FileNotFoundError) as e:
        exit_with_error(str(e), ExitCode.CONFIG_ERROR)

    settings = loaded.logging
    logger = create_file_logger(
        settings.file or get_dbctl_cli_log_file(),
        level=settings.level.value,
        rendering=settings.format.value,
        max_bytes=settings.max_bytes,
        backup_count=settings.backup_count,
        command=tokens[0] if tokens else "",
    )
    logger.debug("cli_invoked", tokens=list(tokens), config=config)
    if config_error is not None:
        logger.warning("config_fallback", error=config_error)

    ctx = CLIContext(
        config=loaded,
        quiet=quiet,
        config_path=config,
        config_error=config_error,
        logger=logger,
    )
    with ctx.activate():
        app(tokens)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the dbctl app with its global options.

    Invoke ``app.meta(tokens)`` to parse global options before dispatching
    to a command.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name=APP_NAME,
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[
            bool, Parameter(name=["--verbose", "-v"], help="Log at debug level")
        ] = False,
        quiet: Annotated[
            bool,
            Parameter(name=["--quiet", "-q"], help="Suppress non-essential output"),
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Launch dbctl with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Log at debug level.
            quiet: Suppress non-essential output.
            config: Explicit path to config file.
        """
        _run_with_context(app, tokens, verbose=verbose, quiet=quiet, config=config)

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `dbctl` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
