"""CLI tests using click's CliRunner."""

from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from xsnotify import __version__
from xsnotify.cli import main
from xsnotify.core import read_config_file
from xsnotify.relay.config import NotificationStrategy
from xsnotify.update import UpdateStatus


class TestConfigCommands:
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_path(self, config_home):
        result = CliRunner().invoke(main, ["config", "path"])
        assert result.exit_code == 0
        assert str(config_home / "config.yaml") in result.output

    def test_config_show(self, config_home):
        result = CliRunner().invoke(main, ["config", "show"])
        assert result.exit_code == 0
        assert "42069" in result.output
        assert (config_home / "config.yaml").exists()

    def test_config_show_invalid(self, config_home):
        config_home.mkdir(parents=True)
        (config_home / "config.yaml").write_text("port: not-a-number\n")
        result = CliRunner().invoke(main, ["config", "show"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_config_show_escapes_app_names(self, config_home):
        config_home.mkdir(parents=True)
        (config_home / "config.yaml").write_text('skipped_apps: ["[bold]", "VRCX"]\n')
        result = CliRunner().invoke(main, ["config", "show"])
        assert result.exit_code == 0, result.output
        assert "[bold]" in result.output
        assert "VRCX" in result.output


class TestRunCommand:
    def test_invalid_config_refuses_to_start(self, config_home):
        config_home.mkdir(parents=True)
        (config_home / "config.yaml").write_text("min_timeout: 50\nmax_timeout: 10\n")

        with patch("xsnotify.relay.supervisor.RelaySupervisor") as supervisor_cls:
            result = CliRunner().invoke(main, ["run"])

        assert result.exit_code == 1
        assert "Error" in result.output
        supervisor_cls.assert_not_called()

    def test_unwritable_config_home_refuses_to_start(self, config_home):
        config_home.write_text("a file where the directory should be")

        with patch("xsnotify.relay.supervisor.RelaySupervisor") as supervisor_cls:
            result = CliRunner().invoke(main, ["run"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "Cannot create" in result.output
        supervisor_cls.assert_not_called()

    def test_flags_override_config(self, config_home, monkeypatch):
        monkeypatch.setenv("XSNOTIF_HOST", "from-env")
        supervisor_cls = MagicMock()
        supervisor_cls.return_value.run = AsyncMock()

        with patch("xsnotify.relay.supervisor.RelaySupervisor", supervisor_cls):
            result = CliRunner().invoke(main, [
                "run", "-p", "9000", "-n", "polling", "--no-dynamic-timeout",
                "--skipped-app", "VRCX", "--skipped-app", "Steam",
                "--sink", "console", "--spool-dir", str(config_home / "spool"),
            ])

        assert result.exit_code == 0, result.output
        config, source, sink = supervisor_cls.call_args[0]
        assert config.port == 9000
        assert config.host == "from-env"
        assert config.notification_strategy == NotificationStrategy.POLLING
        assert config.dynamic_timeout is False
        assert config.skipped_apps == ("VRCX", "Steam")
        assert source.name == "spool"
        assert sink.name == "console"
        supervisor_cls.return_value.run.assert_awaited_once()

    def test_default_sink_and_source(self, config_home):
        supervisor_cls = MagicMock()
        supervisor_cls.return_value.run = AsyncMock()

        with patch("xsnotify.relay.supervisor.RelaySupervisor", supervisor_cls):
            result = CliRunner().invoke(main, ["run", "--redeliver", "--queue-limit", "5"])

        assert result.exit_code == 0, result.output
        _, source, sink = supervisor_cls.call_args[0]
        kwargs = supervisor_cls.call_args[1]
        assert source.name == "stdin"
        assert sink.name == "xsoverlay"
        assert kwargs["redeliver"] is True
        assert kwargs["queue"].maxsize == 5

    def test_unsupported_source_strategy_pair(self, config_home):
        result = CliRunner().invoke(main, ["run", "-n", "polling", "--source", "stdin"])
        assert result.exit_code == 1
        assert "does not support polling" in result.output


class TestSettingsCommand:
    def test_edit_port_and_apps(self, config_home):
        keystrokes = "\n".join([
            "port", "2000",
            "port", "abc",
            "add_app", "VRCX",
            "quit",
        ]) + "\n"
        result = CliRunner().invoke(main, ["settings"], input=keystrokes)

        assert result.exit_code == 0, result.output
        assert "Invalid value for port" in result.output
        saved = read_config_file()
        assert saved.port == 2000
        assert saved.skipped_apps == ("VRCX",)


class TestCheckUpdate:
    def test_reports_new_version(self):
        status = UpdateStatus(current="1.0.0", latest="2.0.0")
        with patch("xsnotify.update.check_for_update", AsyncMock(return_value=status)):
            result = CliRunner().invoke(main, ["check-update"])
        assert result.exit_code == 0
        assert "A NEW VERSION" in result.output
        assert "v2.0.0" in result.output

    def test_reports_up_to_date(self):
        status = UpdateStatus(current="1.0.0", latest="1.0.0")
        with patch("xsnotify.update.check_for_update", AsyncMock(return_value=status)):
            result = CliRunner().invoke(main, ["check-update"])
        assert "latest version" in result.output
