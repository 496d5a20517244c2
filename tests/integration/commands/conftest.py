from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from dbctl.cli import create_app
from tests.integration.conftest import FakeTools


@pytest.fixture
def config_file(tmp_path: Path, fake_tools: FakeTools) -> Path:
    """Write a config pointing at fake tools and a fresh data directory."""
    run_dir = tmp_path / "run"
    run_dir.mkdir(exist_ok=True)
    tools = fake_tools.tools.as_dict()
    tool_lines = "\n".join(
        f'{name} = "{path}"' for name, path in tools.items() if path is not None
    )
    path = tmp_path / "dbctl.toml"
    _ = path.write_text(
        f"""\
[server]
data_dir = "{tmp_path / "data"}"
pid_file = "{run_dir / "mysqld.pid"}"
socket = "{run_dir / "mysqld.sock"}"

[tools]
{tool_lines}

[poll]
max_attempts = 20
interval = 0.05
"""
    )
    return path


@pytest.fixture
def dbctl_cli_with_exit_code(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code.

    Runs through the meta app so global options such as --config apply.
    """

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        """Run CLI app and return exit code (0 if no SystemExit)."""

        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
