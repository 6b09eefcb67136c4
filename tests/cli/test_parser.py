"""
Unit tests for the WakaTimeKit CLI.
"""

import os
from concurrent.futures import Future
from unittest.mock import patch

import pytest

from wakatimekit.cli.parser import CLI, CliHost
from wakatimekit.config.settings import AgentSettings


def _done(value):
    future = Future()
    future.set_result(value)
    return future


@pytest.fixture
def settings(tmp_path):
    return AgentSettings(api_key="k", resources_dir=str(tmp_path / "res"))


@pytest.fixture
def cli(settings):
    with patch("wakatimekit.cli.parser.load_settings", return_value=settings):
        yield CLI()


class TestCliHost:
    """Tests for CliHost."""

    def test_identity_from_settings(self, settings):
        host = CliHost(settings, "demo")
        assert host.name == "cli"
        assert host.get_project_name() == "demo"

    def test_error_goes_to_stderr(self, settings, capsys):
        CliHost(settings).show_error("Error", "boom")
        assert "Error: boom" in capsys.readouterr().err


class TestCLI:
    """Tests for command dispatch."""

    def test_no_command_prints_help(self, cli, capsys):
        assert cli.run([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_version(self, cli, capsys):
        with pytest.raises(SystemExit):
            cli.run(["--version"])
        assert "WakaTimeKit" in capsys.readouterr().out

    def test_bootstrap_success(self, cli):
        with patch("wakatimekit.cli.parser.WakaTimeAgent.bootstrap", return_value=_done(True)):
            assert cli.run(["bootstrap"]) == 0

    def test_bootstrap_failure(self, cli):
        with patch("wakatimekit.cli.parser.WakaTimeAgent.bootstrap", return_value=_done(False)):
            assert cli.run(["bootstrap"]) == 1

    def test_heartbeat_sent(self, cli):
        with patch("wakatimekit.cli.parser.WakaTimeAgent.bootstrap", return_value=_done(True)):
            with patch(
                "wakatimekit.cli.parser.WakaTimeAgent.notify", return_value=_done(True)
            ) as notify:
                assert cli.run(["heartbeat", "--file", "main.go", "--write"]) == 0

        file, is_write = notify.call_args[0]
        assert file == os.path.abspath("main.go")
        assert is_write is True

    def test_heartbeat_not_ready(self, cli):
        with patch("wakatimekit.cli.parser.WakaTimeAgent.bootstrap", return_value=_done(False)):
            with patch("wakatimekit.cli.parser.WakaTimeAgent.notify") as notify:
                assert cli.run(["heartbeat", "--file", "main.go"]) == 1
        notify.assert_not_called()

    def test_status_without_python(self, cli, capsys):
        with patch("wakatimekit.cli.parser.WakaTimeAgent") as agent_cls:
            agent = agent_cls.return_value
            agent.locator.locate.return_value = None
            agent.tool.is_installed.return_value = False
            assert cli.run(["status"]) == 1

        out = capsys.readouterr().out
        assert "not found" in out
        agent.shutdown.assert_called_once()

    def test_api_key_saved(self, cli):
        with patch("wakatimekit.cli.parser.save_api_key") as save, patch(
            "wakatimekit.cli.parser.WakaTimeAgent"
        ) as agent_cls:
            assert cli.run(["api-key", " new-key "]) == 0

        save.assert_called_once_with("new-key")
        agent_cls.assert_not_called()

    def test_api_key_empty(self, cli):
        with patch("wakatimekit.cli.parser.save_api_key") as save:
            assert cli.run(["api-key", "  "]) == 1
        save.assert_not_called()

    def test_api_key_write_error(self, cli):
        with patch(
            "wakatimekit.cli.parser.save_api_key", side_effect=PermissionError("denied")
        ):
            assert cli.run(["api-key", "new-key"]) == 1

    def test_config_error(self, capsys):
        from wakatimekit.core.exceptions import ConfigError

        with patch("wakatimekit.cli.parser.load_settings", side_effect=ConfigError("bad")):
            assert CLI().run(["bootstrap"]) == 1
