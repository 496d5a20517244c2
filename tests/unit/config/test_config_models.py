"""Tests for configuration models and the supervisor inputs they build."""

from pathlib import Path

import pytest

from dbctl.config import (
    DEFAULT_PID_FILE_NAME,
    Config,
    ConfigSourceName,
    ConfigValidationError,
    LogFormat,
    LogLevel,
)
from dbctl.supervisor import ErrorSink, PollPolicy
from tests.conftest import write_script


class TestFromDict:
    def test_defaults(self) -> None:
        config = Config.from_dict({})

        assert config.server.data_dir is None
        assert config.server.lock is False
        assert config.tools.search_dirs == ()
        assert config.poll.max_attempts == 30
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON

    def test_values_are_coerced(self) -> None:
        config = Config.from_dict(
            {
                "server": {"data_dir": "/srv/mysql", "port": 3307},
                "tools": {"search_dirs": ["/opt/mysql/bin"]},
            }
        )

        assert config.server.data_dir == Path("/srv/mysql")
        assert config.server.port == 3307
        assert config.tools.search_dirs == (Path("/opt/mysql/bin"),)

    def test_invalid_port(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"server": {"port": 70000}}, source="dbctl.toml")

        assert exc_info.value.key == "server.port"
        assert exc_info.value.value == 70000
        assert exc_info.value.source == "dbctl.toml"
        assert "dbctl.toml" in str(exc_info.value)

    def test_unknown_section_key(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"server": {"datadir": "/srv/mysql"}})

        assert exc_info.value.key == "server.datadir"

    def test_invalid_poll_policy(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"poll": {"max_attempts": 0}})

        assert exc_info.value.key == "poll.max_attempts"

    def test_unknown_sections_are_ignored(self) -> None:
        config = Config.from_dict({"client": {"user": "root"}})

        assert config.server.data_dir is None

    def test_frozen(self) -> None:
        config = Config.from_dict({})

        with pytest.raises(ValueError, match="frozen"):
            config.server = config.server  # pyright: ignore[reportAttributeAccessIssue]

    def test_to_dict(self) -> None:
        data = Config.from_dict({"server": {"data_dir": "/srv/mysql"}}).to_dict()

        assert data["server"]["data_dir"] == "/srv/mysql"
        assert data["logging"]["level"] == "info"


class TestToHandle:
    def test_requires_data_dir(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({}).to_handle()

        assert exc_info.value.key == "server.data_dir"

    def test_default_pid_file_lives_in_data_dir(self) -> None:
        handle = Config.from_dict({"server": {"data_dir": "/srv/mysql"}}).to_handle()

        assert handle.data_dir == Path("/srv/mysql")
        assert handle.pid_file == Path("/srv/mysql") / DEFAULT_PID_FILE_NAME
        assert handle.error_sink is ErrorSink.SYSLOG

    def test_all_fields(self) -> None:
        handle = Config.from_dict(
            {
                "server": {
                    "data_dir": "/srv/mysql",
                    "pid_file": "/run/mysqld/mysqld.pid",
                    "port": 3307,
                    "socket": "/run/mysqld/mysqld.sock",
                    "log_error": "/var/log/mysql/error.log",
                    "user": "mysql",
                    "skip_grant_tables": True,
                    "skip_networking": True,
                }
            }
        ).to_handle()

        assert handle.pid_file == Path("/run/mysqld/mysqld.pid")
        assert handle.port == 3307
        assert handle.socket == Path("/run/mysqld/mysqld.sock")
        assert handle.log_error == Path("/var/log/mysql/error.log")
        assert handle.user == "mysql"
        assert handle.skip_grant_tables is True
        assert handle.skip_networking is True

    def test_relative_paths_are_made_absolute(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        handle = Config.from_dict({"server": {"data_dir": "data"}}).to_handle()

        assert handle.data_dir == tmp_path / "data"


class TestToPolicy:
    def test_builds_poll_policy(self) -> None:
        config = Config.from_dict(
            {"poll": {"max_attempts": 5, "interval": 0.2, "multiplier": 2.0}}
        )

        assert config.to_policy() == PollPolicy(
            max_attempts=5, interval=0.2, multiplier=2.0, max_interval=30.0
        )

    def test_long_exponential_poll_has_finite_ceiling(self) -> None:
        config = Config.from_dict({"poll": {"max_attempts": 2000, "multiplier": 2}})

        policy = config.to_policy()

        assert policy.delay(1500) == 30.0
        assert policy.ceiling() < 2000 * 30.0


class TestResolveTools:
    def test_explicit_paths_and_search_dirs(self, tmp_path: Path) -> None:
        safe = write_script(tmp_path / "custom" / "mysqld_safe", "exit 0\n")
        admin = write_script(tmp_path / "extra" / "mysqladmin", "exit 0\n")
        config = Config.from_dict(
            {
                "tools": {
                    "mysqld_safe": str(safe),
                    "search_dirs": [str(tmp_path / "extra")],
                }
            }
        )

        tools = config.resolve_tools(search_path=str(tmp_path / "empty"))

        assert tools.mysqld_safe == safe
        assert tools.mysqladmin == admin


class TestLoad:
    def test_merges_sources_in_precedence_order(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        isolated_environment: Path,
    ) -> None:
        isolated_environment.mkdir()
        _ = (isolated_environment / "dbctl.toml").write_text(
            '[server]\ndata_dir = "/user/data"\nport = 3301\nuser = "alice"\n'
        )
        project = tmp_path / "project"
        project.mkdir()
        _ = (project / "dbctl.toml").write_text(
            '[server]\ndata_dir = "/project/data"\nport = 3302\n'
        )
        monkeypatch.chdir(project)
        monkeypatch.setenv("DBCTL_SERVER__PORT", "3303")

        config = Config.load(cli_overrides={"logging": {"level": "debug"}})

        assert config.server.data_dir == Path("/project/data")
        assert config.server.port == 3303
        assert config.server.user == "alice"
        assert config.logging.level is LogLevel.DEBUG

    def test_sources_are_listed_highest_first(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        config = Config.load(cli_overrides={"server": {"lock": True}})

        names = [source.name for source in config.sources]
        assert names == [
            ConfigSourceName.CLI,
            ConfigSourceName.ENV,
            ConfigSourceName.PROJECT,
            ConfigSourceName.USER,
            ConfigSourceName.DEFAULT,
        ]
        assert config.sources[2].exists is False

    def test_value_origins_name_the_winning_source(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        isolated_environment: Path,
    ) -> None:
        isolated_environment.mkdir()
        _ = (isolated_environment / "dbctl.toml").write_text(
            '[server]\nuser = "alice"\nport = 3301\n'
        )
        _ = (tmp_path / "dbctl.toml").write_text('[server]\nport = 3302\n')
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DBCTL_POLL__INTERVAL", "0.5")

        config = Config.load(cli_overrides={"server": {"lock": True}})

        origins = config.value_origins()
        assert origins["server.lock"] is ConfigSourceName.CLI
        assert origins["poll.interval"] is ConfigSourceName.ENV
        assert origins["server.port"] is ConfigSourceName.PROJECT
        assert origins["server.user"] is ConfigSourceName.USER
        assert origins["poll.max_attempts"] is ConfigSourceName.DEFAULT
        assert "server.data_dir" not in origins

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        _ = path.write_text('[server]\ndata_dir = "/custom"\n')

        config = Config.load(config_path=path)

        assert config.server.data_dir == Path("/custom")

    def test_missing_explicit_config_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _ = Config.load(config_path=tmp_path / "missing.toml")

    def test_env_strings_are_coerced_per_field(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        path = tmp_path / "dbctl.toml"
        _ = path.write_text('[server]\ndata_dir = "/srv/mysql"\n')
        monkeypatch.setenv("DBCTL_SERVER__USER", "1000")
        monkeypatch.setenv("DBCTL_SERVER__PORT", "3307")
        monkeypatch.setenv("DBCTL_SERVER__SKIP_NETWORKING", "true")
        monkeypatch.setenv("DBCTL_POLL__INTERVAL", "0.25")

        config = Config.load(config_path=path)

        assert config.server.user == "1000"
        assert config.server.port == 3307
        assert config.server.skip_networking is True
        assert config.poll.interval == 0.25
        assert config.server.data_dir == Path("/srv/mysql")

    def test_env_can_be_excluded(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DBCTL_SERVER__PORT", "3303")

        config = Config.load(include_env=False)

        assert config.server.port is None


class TestFromFile:
    def test_reads_single_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dbctl.toml"
        _ = path.write_text('[server]\ndata_dir = "/srv/mysql"\n')

        config = Config.from_file(path)

        assert config.server.data_dir == Path("/srv/mysql")
        assert config.sources[0].path == path
