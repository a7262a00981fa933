"""Tests for the command-line interface."""

import pytest

from watchrun import cli
from watchrun.config import WatchConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("WATCHRUN_WAIT", "WATCHRUN_COALESCE", "WATCHRUN_EXCLUDE"):
        monkeypatch.delenv(name, raising=False)


class TestParseConfig:
    """Tests for parse_config."""

    def test_command_only(self):
        config = cli.parse_config(["make"])

        assert config.command == ["make"]
        assert config.watch_entries == []
        assert config.exclude_entries == []
        assert config.wait is False
        assert config.coalesce is False

    def test_all_flags(self):
        config = cli.parse_config([
            "-w", "-c", "-v",
            "-d", "src", "tests",
            "-x", "build", "dist",
            "--", "pytest", "-x",
        ])

        assert config.wait is True
        assert config.coalesce is True
        assert config.verbose is True
        assert config.watch_entries == ["src", "tests"]
        assert config.exclude_entries == ["build", "dist"]
        assert config.command == ["pytest", "-x"]

    def test_repeated_entries_accumulate(self):
        config = cli.parse_config(["-d", "a", "-x", "b", "-d", "c", "-x", "d", "--", "make"])

        assert config.watch_entries == ["a", "c"]
        assert config.exclude_entries == ["b", "d"]

    def test_command_options_are_not_parsed(self):
        config = cli.parse_config(["-w", "echo", "-n", "hi"])

        assert config.wait is True
        assert config.command == ["echo", "-n", "hi"]

    def test_missing_command_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.parse_config(["-w"])

        assert exc_info.value.code != 0
        assert "no command" in capsys.readouterr().err

    def test_bad_flag_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.parse_config(["--bogus", "--", "make"])

        assert exc_info.value.code != 0

    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("WATCHRUN_WAIT", "yes")
        monkeypatch.setenv("WATCHRUN_EXCLUDE", "build")

        config = cli.parse_config(["-x", "dist", "--", "make"])

        assert config.wait is True
        assert config.exclude_entries == ["build", "dist"]


class TestMain:
    """Tests for main."""

    def test_main_runs_process(self, monkeypatch):
        started = []

        class FakeProcess:
            def __init__(self, config):
                assert isinstance(config, WatchConfig)
                self.config = config

            def start(self):
                started.append(self.config.command)
                raise KeyboardInterrupt

        monkeypatch.setattr(cli, "WatchRunProcess", FakeProcess)
        monkeypatch.setattr(cli, "_load_env", lambda: None)

        assert cli.main(["echo", "hi"]) == 0
        assert started == [["echo", "hi"]]

    def test_main_without_command_exits(self, monkeypatch):
        monkeypatch.setattr(cli, "_load_env", lambda: None)

        with pytest.raises(SystemExit):
            cli.main([])
