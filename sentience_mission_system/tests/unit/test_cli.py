"""Unit tests for the command line entry point."""

import io
import json

import pytest

from sentience_avionics.capabilities import TypeSetScope
from sentience_avionics.settings import Settings
from sentience_mission_system import cli
from sentience_mission_system.bootstrap import create_app_context
from sentience_mission_system.components import (
    SimulatedDriveEffector,
    SimulatedOdometrySensor,
    SimulatedRobot,
)
from sentience_mission_system.output import Output

GOOD_BUNDLE = {
    "output": {"method": "console"},
    "log": {"targets": ["none"]},
    "robot": {
        "robot_type": "SimulatedRobot",
        "sensors": [{"type": "SimulatedOdometrySensor"}],
        "effectors": [{"type": "SimulatedDriveEffector"}],
    },
}


@pytest.fixture
def context(tmp_path, mock_logger):
    def make(bundles):
        for name, sections in bundles.items():
            (tmp_path / f"{name}.sentience").write_text(json.dumps(sections), encoding="utf-8")
        stream = io.StringIO()
        app_context = create_app_context(
            Settings(_env_file=None, config_dir=str(tmp_path)),
            scope=TypeSetScope([SimulatedRobot, SimulatedOdometrySensor, SimulatedDriveEffector]),
            output=Output(stream=stream, logger=mock_logger),
            logger=mock_logger,
        )
        return app_context, stream
    return make


class InterruptingStream:
    def __iter__(self):
        raise KeyboardInterrupt


class TestParser:
    """Test argument parsing."""

    def test_no_bundle(self):
        assert cli.build_parser().parse_args([]).bundle == ""

    def test_bundle(self):
        assert cli.build_parser().parse_args(["lab"]).bundle == "lab"

    def test_main_passes_bundle(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "run", lambda bundle, **kw: calls.append((bundle, kw)) or 0)
        assert cli.main(["lab"]) == 0
        assert calls == [("lab", {"install_signals": True})]


class TestWaitForExit:
    """Test the stdin wait loop."""

    def test_stops_at_exit_command(self):
        stream = io.StringIO("hello\n  exit  \nafter\n")
        cli.wait_for_exit(stream)
        assert stream.readline() == "after\n"

    def test_stops_at_end_of_stream(self):
        cli.wait_for_exit(io.StringIO("no exit here\n"))


class TestRun:
    """Test the process lifecycle."""

    def test_clean_run(self, context):
        app_context, _ = context({"default": GOOD_BUNDLE})
        status = cli.run(context=app_context, stdin=io.StringIO("exit\n"))

        assert status == 0
        assert app_context.output.is_deactivated

    def test_named_bundle(self, context):
        app_context, _ = context({"default": {}, "lab": GOOD_BUNDLE})
        assert cli.run("lab", context=app_context, stdin=io.StringIO("")) == 0

    def test_failed_bootstrap(self, context):
        app_context, console = context({
            "default": {"output": {"method": "console"}, "log": {"targets": ["none"]}},
        })
        status = cli.run(context=app_context, stdin=io.StringIO("exit\n"))

        assert status == 1
        assert app_context.output.is_deactivated
        assert "Failed to start robot" in console.getvalue()

    def test_interrupt_shuts_down(self, context, mock_logger):
        app_context, _ = context({"default": GOOD_BUNDLE})
        status = cli.run(context=app_context, stdin=InterruptingStream())

        assert status == 0
        assert app_context.output.is_deactivated
        events = [call.args[0] for call in mock_logger.info.call_args_list]
        assert "interrupted" in events

    def test_signal_handler_raises_interrupt(self):
        with pytest.raises(KeyboardInterrupt):
            cli._interrupt(15, None)
