import contextlib
import os
import signal
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

from dbctl.supervisor import ProcessHandle, read_pid
from dbctl.utils import ServerTools
from tests.conftest import write_script


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


# Parses --pid-file like mysqld_safe, records its own pid there and removes
# it again on SIGTERM
FAKE_MYSQLD_SAFE = """\
PIDFILE=""
for arg in "$@"; do
    case "$arg" in
        --pid-file=*) PIDFILE="${arg#--pid-file=}" ;;
    esac
done
echo "$@" > "$PIDFILE.args"
echo "fake mysqld_safe starting"
trap 'rm -f "$PIDFILE"; exit 0' TERM
echo $$ > "$PIDFILE"
while true; do
    sleep 0.1
done
"""

FAKE_MYSQLD_SAFE_NO_PID = """\
echo "fake mysqld_safe giving up" >&2
exit 1
"""

FAKE_MYSQL_INSTALL_DB = """\
DATADIR=""
for arg in "$@"; do
    case "$arg" in
        --datadir=*) DATADIR="${arg#--datadir=}" ;;
    esac
done
mkdir -p "$DATADIR/mysql"
echo "Installing system tables in $DATADIR"
"""


@dataclass(frozen=True, slots=True)
class FakeTools:
    """Directory of fake server tools and the ServerTools pointing at them."""

    bin_dir: Path
    tools: ServerTools
    admin_log: Path


@pytest.fixture
def fake_tools(tmp_path: Path) -> FakeTools:
    bin_dir = tmp_path / "fake-bin"
    admin_log = tmp_path / "mysqladmin.log"
    tools = ServerTools(
        mysqld_safe=write_script(bin_dir / "mysqld_safe", FAKE_MYSQLD_SAFE),
        mysql_install_db=write_script(
            bin_dir / "mysql_install_db", FAKE_MYSQL_INSTALL_DB
        ),
        mysqladmin=write_script(
            bin_dir / "mysqladmin", f'echo "$@" >> "{admin_log}"\n'
        ),
    )
    return FakeTools(bin_dir=bin_dir, tools=tools, admin_log=admin_log)


@pytest.fixture
def server_handle(tmp_path: Path) -> Iterator[ProcessHandle]:
    """Handle for a fake server; kills anything left running afterwards."""
    run_dir = tmp_path / "run"
    run_dir.mkdir()
    handle = ProcessHandle(
        data_dir=tmp_path / "data",
        pid_file=run_dir / "mysqld.pid",
        socket=run_dir / "mysqld.sock",
    )
    yield handle

    pid = read_pid(handle.pid_file)
    if pid is not None and pid != os.getpid():
        with contextlib.suppress(ProcessLookupError):
            os.kill(pid, signal.SIGKILL)
