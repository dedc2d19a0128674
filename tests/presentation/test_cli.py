"""Tests for CLI module."""

import json
import os

import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from stagehand.presentation.cli.cli import async_main, main, read_credentials

ENV = {"STAGEHAND_USERNAME": "CORP\\deploy", "STAGEHAND_PASSWORD": "s3cret"}


def _report(aborted=False, unclean=0):
    report = MagicMock()
    report.aborted = aborted
    report.run.unclean_outcomes = tuple(MagicMock() for _ in range(unclean))
    return report


def _make_container(**overrides):
    """Create a mock container with sensible defaults."""
    container = MagicMock()
    container.run_update = MagicMock()
    container.run_update.execute = AsyncMock(return_value=_report())
    container.run_update.validate = AsyncMock(return_value=True)
    for key, value in overrides.items():
        setattr(container, key, value)
    return container


def _write_config(tmp_path, **hosts):
    config_file = tmp_path / "stagehand.json"
    config_file.write_text(json.dumps({"hosts": hosts}))
    return str(config_file)


async def _run_with(container, *argv):
    with patch("sys.argv", ["stagehand", *argv]), \
         patch.dict(os.environ, ENV), \
         patch(
             "stagehand.presentation.cli.cli.create_container",
             return_value=container,
         ) as factory:
        await async_main()
    return factory


class TestCLIHelp:
    """Test all help outputs (no adapter dependencies)."""

    @pytest.mark.asyncio
    async def test_no_command_prints_help(self, capsys):
        with patch("sys.argv", ["stagehand"]):
            await async_main()
        captured = capsys.readouterr()
        assert "guided multi-host tax file update" in captured.out

    @pytest.mark.asyncio
    async def test_help_flag(self):
        with patch("sys.argv", ["stagehand", "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", ["run", "plan", "validate", "summarize"])
    async def test_subcommand_help(self, command):
        with patch("sys.argv", ["stagehand", command, "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()


class TestPlanCommand:
    @pytest.mark.asyncio
    async def test_lists_steps(self, tmp_path, capsys):
        config = _write_config(tmp_path, primary="TAXSRV01", targets=["TAXWS01"])
        with patch("sys.argv", ["stagehand", "plan", "--config", config]):
            await async_main()

        out = capsys.readouterr().out
        assert "[*] 8 steps:" in out
        assert "  1. [Automated] Stop TaxService on primary and targets" in out
        assert "  4. [Manual] Run the update wizard on the primary" in out

    @pytest.mark.asyncio
    async def test_invalid_host(self, tmp_path, capsys):
        config = _write_config(tmp_path, primary="not a host")
        with patch("sys.argv", ["stagehand", "plan", "-c", config]), \
             pytest.raises(SystemExit, match="1"):
            await async_main()
        assert "[-] Invalid settings" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_bad_environment_override(self, tmp_path, capsys):
        config = _write_config(tmp_path, primary="TAXSRV01")
        with patch("sys.argv", ["stagehand", "plan", "-c", config]), \
             patch.dict(os.environ, {"STAGEHAND_SSH_PORT": "abc"}), \
             pytest.raises(SystemExit, match="1"):
            await async_main()
        assert "[-] Invalid settings" in capsys.readouterr().out


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_completed(self, tmp_path, capsys):
        container = _make_container()
        config = _write_config(tmp_path, primary="TAXSRV01")

        factory = await _run_with(container, "run", "--config", config)

        out = capsys.readouterr().out
        assert "[*] Starting tax file update from TAXSRV01..." in out
        assert "[+] Run completed." in out
        credentials = factory.call_args.args[1]
        assert credentials.username == "CORP\\deploy"
        assert "s3cret" not in out

    @pytest.mark.asyncio
    async def test_completed_with_problems(self, tmp_path, capsys):
        container = _make_container()
        container.run_update.execute = AsyncMock(return_value=_report(unclean=2))

        await _run_with(container, "run", "-c", str(tmp_path / "none.json"))

        assert "[!] Run completed; 2 step(s) reported problems." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_aborted_exits_1(self, tmp_path, capsys):
        container = _make_container()
        container.run_update.execute = AsyncMock(return_value=_report(aborted=True))

        with pytest.raises(SystemExit, match="1"):
            await _run_with(container, "run", "-c", str(tmp_path / "none.json"))
        assert "[-] Run aborted at validation." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_interrupted_exits_130(self, tmp_path):
        container = _make_container()
        container.run_update.execute = AsyncMock(side_effect=KeyboardInterrupt)

        with pytest.raises(SystemExit, match="130"):
            await _run_with(container, "run", "-c", str(tmp_path / "none.json"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", ["run", "validate"])
    async def test_bad_environment_override(self, tmp_path, capsys, command):
        container = _make_container()
        config = _write_config(tmp_path, primary="TAXSRV01")

        with patch.dict(os.environ, {"STAGEHAND_SSH_PORT": "abc"}), \
             pytest.raises(SystemExit, match="1"):
            await _run_with(container, command, "-c", config)

        assert "[-] Invalid settings: invalid literal for int()" in capsys.readouterr().out
        container.run_update.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error(self, tmp_path, capsys):
        container = _make_container()
        container.run_update.execute = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(SystemExit, match="1"):
            await _run_with(container, "run", "-c", str(tmp_path / "none.json"))
        assert "[-] Update Failed: boom" in capsys.readouterr().out


class TestValidateCommand:
    @pytest.mark.asyncio
    async def test_passed(self, tmp_path, capsys):
        container = _make_container()
        await _run_with(container, "validate", "-c", str(tmp_path / "none.json"))
        assert "[+] Validation passed." in capsys.readouterr().out
        container.run_update.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_exits_1(self, tmp_path, capsys):
        container = _make_container()
        container.run_update.validate = AsyncMock(return_value=False)

        with pytest.raises(SystemExit, match="1"):
            await _run_with(container, "validate", "-c", str(tmp_path / "none.json"))
        assert "[-] Validation failed." in capsys.readouterr().out


class TestSummarizeCommand:
    @pytest.mark.asyncio
    async def test_summarize(self, tmp_path, capsys):
        log = tmp_path / "stagehand_20240603_091542.log"
        log.write_text(
            "2024-06-03 09:15:42 - SUCCESS - Host TAXSRV01 is reachable\n"
            "2024-06-03 09:15:50 - ERROR - Host TAXWS02 is unreachable\n"
        )
        with patch("sys.argv", ["stagehand", "summarize", str(log)]):
            await async_main()

        out = capsys.readouterr().out
        assert "DEPLOYMENT SUMMARY" in out
        assert "Host TAXWS02 is unreachable" in out

    @pytest.mark.asyncio
    async def test_missing_log(self, tmp_path, capsys):
        with patch("sys.argv", ["stagehand", "summarize", str(tmp_path / "x.log")]), \
             pytest.raises(SystemExit, match="1"):
            await async_main()
        assert "[-] Cannot summarize" in capsys.readouterr().out


class TestReadCredentials:
    def test_from_environment(self):
        with patch.dict(os.environ, ENV):
            credentials = read_credentials(None)
        assert credentials.username == "CORP\\deploy"
        assert credentials.secret == "s3cret"

    def test_flag_wins_and_secret_prompted(self):
        with patch.dict(os.environ, {"STAGEHAND_USERNAME": "CORP\\other"}), \
             patch("getpass.getpass", return_value="typed") as prompt:
            os.environ.pop("STAGEHAND_PASSWORD", None)
            credentials = read_credentials("CORP\\deploy")
        assert credentials.username == "CORP\\deploy"
        assert credentials.secret == "typed"
        prompt.assert_called_once()

    def test_username_prompted(self):
        with patch.dict(os.environ, {"STAGEHAND_PASSWORD": "pw"}), \
             patch("builtins.input", return_value=" CORP\\deploy ") as ask:
            os.environ.pop("STAGEHAND_USERNAME", None)
            credentials = read_credentials(None)
        assert credentials.username == "CORP\\deploy"
        ask.assert_called_once()


def test_main_interrupt_exits_130():
    with patch("stagehand.presentation.cli.cli.async_main", new=MagicMock()), \
         patch(
             "stagehand.presentation.cli.cli.asyncio.run",
             side_effect=KeyboardInterrupt,
         ), \
         pytest.raises(SystemExit, match="130"):
        main()
