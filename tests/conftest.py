"""Shared test fixtures for dbctl tests."""

import os
import stat
from pathlib import Path

import pytest
from rich.console import Console

from dbctl.supervisor import Liveness, ProcessHandle


class FakeProbe:
    """Process probe answering from a table of pids."""

    def __init__(
        self,
        states: dict[int, Liveness] | None = None,
        *,
        default: Liveness = Liveness.STOPPED,
    ) -> None:
        self.states: dict[int, Liveness] = dict(states or {})
        self.default: Liveness = default
        self.calls: list[int] = []

    def exists(self, pid: int) -> Liveness:
        self.calls.append(pid)
        return self.states.get(pid, self.default)


def write_script(path: Path, body: str) -> Path:
    """Write an executable POSIX shell script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(f"#!/bin/sh\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point DBCTL_HOME at a temporary directory and drop DBCTL_ variables."""
    for key in list(os.environ):
        if key.startswith("DBCTL_"):
            monkeypatch.delenv(key)
    home = tmp_path / "dbctl-home"
    monkeypatch.setenv("DBCTL_HOME", str(home))
    return home


@pytest.fixture
def handle(tmp_path: Path) -> ProcessHandle:
    data_dir = tmp_path / "data"
    return ProcessHandle(
        data_dir=data_dir,
        pid_file=tmp_path / "run" / "mysqld.pid",
        user="mysql",
    )


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
