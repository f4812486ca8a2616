"""
Tests for moltbot_lib.cli.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeProbe
from moltbot_lib.cli import build_parser, main, run


class Handoff(Exception):
    """Raised by the fake execvp in place of replacing the process."""


def handoff_execvp(paths=None):
    def execvp(file, argv):
        if paths is not None:
            assert not any(lock.exists() for lock in paths.lock_files)
        raise Handoff(argv)

    return MagicMock(side_effect=execvp)


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestBuildParser:
    """Tests for the argument parser."""

    def test_defaults(self):
        args = parse()
        assert args.verbose is False
        assert args.time is False

    def test_flags(self):
        args = parse("-v", "--time")
        assert args.verbose is True
        assert args.time is True

    def test_unknown_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            parse("--bogus")
        assert exc_info.value.code == 2


class TestRun:
    """Tests for run."""

    def test_already_running_exits_zero(self, tmp_path, paths):
        execvp = MagicMock()

        code = run(parse(), {}, paths=paths, probe=FakeProbe(gateway_running=True), execvp=execvp)

        assert code == 0
        execvp.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_already_running_creates_no_log_file(self, tmp_path, paths):
        env = {"MOLTBOT_LOG_FILE": str(tmp_path / "logs" / "bootstrap.log")}

        code = run(parse(), env, paths=paths, probe=FakeProbe(gateway_running=True), execvp=MagicMock())

        assert code == 0
        assert list(tmp_path.iterdir()) == []

    def test_hands_off_to_gateway(self, paths):
        paths.global_lock.parent.mkdir(parents=True)
        paths.global_lock.write_text("stale")
        execvp = handoff_execvp(paths)

        with pytest.raises(Handoff):
            run(parse(), {"CLAWDBOT_GATEWAY_TOKEN": "tok"}, paths=paths, probe=FakeProbe(), execvp=execvp)

        file, argv = execvp.call_args.args
        assert file == "clawdbot"
        assert argv[:2] == ["clawdbot", "gateway"]
        assert argv[-2:] == ["--token", "tok"]
        assert paths.config_file.exists()

    def test_exec_failure_exits_nonzero(self, paths, capsys):
        execvp = MagicMock(side_effect=FileNotFoundError(2, "No such file or directory"))

        code = run(parse(), {}, paths=paths, probe=FakeProbe(), execvp=execvp)

        assert code == 1
        assert "Gateway failed to start" in capsys.readouterr().err

    def test_timing_summary(self, paths, capsys):
        with pytest.raises(Handoff):
            run(parse("--time"), {}, paths=paths, probe=FakeProbe(), execvp=handoff_execvp())

        err = capsys.readouterr().err
        assert "TOTAL" in err
        assert "merge" in err

    def test_verbose_config_dump_is_redacted(self, paths, capsys):
        env = {"CLAWDBOT_GATEWAY_TOKEN": "gateway-token-value"}

        with pytest.raises(Handoff):
            run(parse("-v"), env, paths=paths, probe=FakeProbe(), execvp=handoff_execvp())

        err = capsys.readouterr().err
        assert "Config:" in err
        assert "gate********" in err
        assert "gateway-token-value" not in err

    def test_quiet(self, paths, capsys):
        with pytest.raises(Handoff):
            run(parse(), {"MOLTBOT_QUIET": "1"}, paths=paths, probe=FakeProbe(), execvp=handoff_execvp())

        err = capsys.readouterr().err
        assert "Starting Moltbot Gateway" not in err
        assert "WARNING" in err

    def test_json_logs_share_run_id(self, paths, capsys, monkeypatch):
        monkeypatch.setenv("MOLTBOT_RUN_ID", "run-1234")

        with pytest.raises(Handoff):
            run(parse(), {"MOLTBOT_LOG_FORMAT": "json"}, paths=paths, probe=FakeProbe(), execvp=handoff_execvp())

        entries = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]
        assert entries
        assert {entry["run_id"] for entry in entries} == {"run-1234"}
        assert {"mount", "merge", "launch"} <= {entry.get("phase") for entry in entries}

    def test_log_file(self, paths, tmp_path):
        log_file = tmp_path / "logs" / "bootstrap.log"

        with pytest.raises(Handoff):
            run(parse(), {"MOLTBOT_LOG_FILE": str(log_file)}, paths=paths, probe=FakeProbe(), execvp=handoff_execvp())

        messages = [json.loads(line)["message"] for line in log_file.read_text().splitlines()]
        assert "Starting Moltbot Gateway" in messages


class TestMain:
    """Tests for main."""

    def test_reads_env_file(self, tmp_path, clean_env):
        from moltbot_lib.config import Paths

        paths = Paths.under(tmp_path)
        paths.env_file.parent.mkdir(parents=True)
        paths.env_file.write_text("CLAWDBOT_GATEWAY_TOKEN=from-file\n")
        execvp = handoff_execvp()

        with (
            patch("moltbot_lib.cli.Paths", return_value=paths),
            patch("moltbot_lib.cli.HostProbe", return_value=FakeProbe()),
            patch("moltbot_lib.cli.os.execvp", execvp),
        ):
            with pytest.raises(Handoff):
                main([])

        assert execvp.call_args.args[1][-2:] == ["--token", "from-file"]

    def test_already_running(self, tmp_path, clean_env):
        from moltbot_lib.config import Paths

        with (
            patch("moltbot_lib.cli.Paths", return_value=Paths.under(tmp_path)),
            patch("moltbot_lib.cli.HostProbe", return_value=FakeProbe(gateway_running=True)),
        ):
            assert main([]) == 0
