"""Unit tests for the shared logging infrastructure.

Tests:
- Severity sets (levels_from, is_enabled)
- configure_logging targets, renderers, and the force flag
- Whole records in the file target under concurrent emission
- Logger emission and filtering through the shared sink
- log_at dispatch for Logger and foreign loggers
- Context logger access
"""

import json
import threading

import pytest

from sentience_protocols import LogLevel, LogTarget
from sentience_shared.logging import (
    DEFAULT_LEVELS,
    Logger,
    configure_logging,
    create_logger,
    get_component_logger,
    get_current_logger,
    is_configured,
    is_enabled,
    levels_from,
    log_at,
    reset_logging,
    set_current_logger,
)


def _read_lines(path):
    return [line for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


# =============================================================================
# SEVERITY SETS
# =============================================================================

class TestLevelsFrom:
    """Test expansion of a minimum severity."""

    def test_from_sentience_level(self):
        levels = levels_from(LogLevel.ERROR)
        assert levels == frozenset({
            LogLevel.ERROR,
            LogLevel.EMERGENCY,
            LogLevel.CRITICAL,
            LogLevel.FAILURE,
        })

    def test_from_stdlib_name(self):
        levels = levels_from("INFO")
        assert LogLevel.NOTIFICATION in levels
        assert LogLevel.DEBUG not in levels

    def test_all_is_wildcard(self):
        assert levels_from("all") == frozenset({LogLevel.ALL})

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError):
            levels_from("verbose")


class TestIsEnabled:
    """Test level set membership checks."""

    def test_defaults_after_reset(self):
        reset_logging()
        for level in DEFAULT_LEVELS:
            assert is_enabled(level)
        assert not is_enabled(LogLevel.DEBUG)
        assert not is_enabled(LogLevel.METRIC)

    def test_all_admits_everything(self):
        configure_logging(levels=[LogLevel.ALL], targets=[LogTarget.NONE], force=True)
        assert is_enabled(LogLevel.METRIC)
        assert is_enabled("failure")

    def test_explicit_set_wins_over_level(self):
        configure_logging(
            "debug",
            levels=["metric"],
            targets=[LogTarget.NONE],
            force=True,
        )
        assert is_enabled(LogLevel.METRIC)
        assert not is_enabled(LogLevel.ERROR)


# =============================================================================
# CONFIGURATION
# =============================================================================

class TestConfigureLogging:
    """Test configure_logging."""

    def test_marks_configured(self):
        reset_logging()
        assert not is_configured()
        configure_logging(targets=[LogTarget.NONE])
        assert is_configured()

    def test_second_call_without_force_is_ignored(self):
        configure_logging(levels=[LogLevel.ALL], targets=[LogTarget.NONE], force=True)
        configure_logging(levels=[LogLevel.FAILURE], targets=[LogTarget.NONE])
        assert is_enabled(LogLevel.DEBUG)

    def test_force_reconfigures(self):
        configure_logging(levels=[LogLevel.ALL], targets=[LogTarget.NONE], force=True)
        configure_logging(levels=[LogLevel.FAILURE], targets=[LogTarget.NONE], force=True)
        assert not is_enabled(LogLevel.DEBUG)

    def test_unknown_target_rejected(self):
        with pytest.raises(ValueError):
            configure_logging(targets=["syslog"], force=True)


class TestFileTarget:
    """Test records written through the file target."""

    def test_enabled_record_written(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.ERROR],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            force=True,
        )
        create_logger("test").error("boom_happened", code=7)

        lines = _read_lines(logfile)
        assert len(lines) == 1
        assert "boom_happened" in lines[0]

    def test_disabled_record_dropped(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.ERROR],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            force=True,
        )
        logger = create_logger("test")
        logger.debug("quiet")
        logger.warning("also_quiet")

        assert _read_lines(logfile) == []

    def test_file_truncated_on_configure(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        logfile.write_text("stale line\n", encoding="utf-8")
        configure_logging(targets=[LogTarget.FILE], logfile=str(logfile), force=True)

        assert _read_lines(logfile) == []

    def test_json_output_carries_severity_and_context(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.ALL],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            json_output=True,
            force=True,
        )
        create_logger("robot", bundle="default").send(LogLevel.ALERT, "low_battery", percent=9)

        record = json.loads(_read_lines(logfile)[0])
        assert record["event"] == "low_battery"
        assert record["level"] == "alert"
        assert record["component"] == "robot"
        assert record["bundle"] == "default"
        assert record["percent"] == 9

    def test_metric_filtered_by_own_severity(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.DEBUG],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            json_output=True,
            force=True,
        )
        logger = create_logger("test")
        logger.metric("startup_time", value=3)
        logger.debug("visible")

        events = [json.loads(line)["event"] for line in _read_lines(logfile)]
        assert events == ["visible"]

    def test_reconfigure_applies_to_existing_logger(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        logger = create_logger("early")
        configure_logging(
            levels=[LogLevel.NOTIFICATION],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            force=True,
        )
        logger.info("after_reconfigure")

        assert any("after_reconfigure" in line for line in _read_lines(logfile))


class TestConcurrentEmission:
    """Test records emitted from many threads at once."""

    THREADS = 8
    RECORDS = 40

    def _emit_from_threads(self, logger, event_for):
        barrier = threading.Barrier(self.THREADS)

        def work(worker):
            bound = logger.bind(worker=worker)
            barrier.wait()
            for record in range(self.RECORDS):
                bound.info(event_for(worker, record))

        threads = [threading.Thread(target=work, args=(w,)) for w in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_multiline_records_stay_contiguous(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.ALL],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            force=True,
        )
        self._emit_from_threads(
            create_logger("concurrent"),
            lambda w, r: f"head-{w}-{r}\nbody-{w}-{r}\ntail-{w}-{r}",
        )

        lines = _read_lines(logfile)
        heads = [i for i, line in enumerate(lines) if "head-" in line]
        assert len(heads) == self.THREADS * self.RECORDS
        assert len(lines) == 3 * len(heads)
        for i in heads:
            tag = lines[i].split("head-", 1)[1].split()[0]
            assert lines[i + 1] == f"body-{tag}"
            assert lines[i + 2].startswith(f"tail-{tag}")

    def test_json_records_are_whole_and_ordered_per_thread(self, tmp_path):
        logfile = tmp_path / "trace.txt"
        configure_logging(
            levels=[LogLevel.ALL],
            targets=[LogTarget.FILE],
            logfile=str(logfile),
            json_output=True,
            force=True,
        )
        self._emit_from_threads(create_logger("concurrent"), lambda w, r: f"record-{r}")

        seen = {}
        for line in _read_lines(logfile):
            record = json.loads(line)
            seen.setdefault(record["worker"], []).append(record["event"])

        assert sorted(seen) == list(range(self.THREADS))
        for events in seen.values():
            assert events == [f"record-{r}" for r in range(self.RECORDS)]


# =============================================================================
# LOGGER
# =============================================================================

class TestLogger:
    """Test the structlog-backed Logger."""

    def test_bind_returns_new_logger(self):
        parent = create_logger("parent")
        child = parent.bind(request="r1")
        assert isinstance(child, Logger)
        assert child is not parent

    def test_component_logger_binds_name(self, mock_logger):
        result = get_component_logger("RobotFactory", mock_logger)
        mock_logger.bind.assert_called_once_with(component="RobotFactory")
        assert result is mock_logger

    def test_context_logger_round_trip(self, mock_logger):
        set_current_logger(mock_logger)
        try:
            assert get_current_logger() is mock_logger
        finally:
            set_current_logger(None)

    def test_default_context_logger(self):
        set_current_logger(None)
        assert isinstance(get_current_logger(), Logger)


class TestLogAt:
    """Test severity dispatch onto foreign loggers."""

    def test_failure_maps_to_critical(self, mock_logger):
        log_at(mock_logger, LogLevel.FAILURE, "gone", code=1)
        mock_logger.critical.assert_called_once_with("gone", severity="failure", code=1)

    def test_alert_maps_to_warning(self, mock_logger):
        log_at(mock_logger, "alert", "careful")
        mock_logger.warning.assert_called_once_with("careful", severity="alert")

    def test_metric_maps_to_debug(self, mock_logger):
        log_at(mock_logger, LogLevel.METRIC, "timing", value=1)
        mock_logger.debug.assert_called_once_with("timing", severity="metric", value=1)

    def test_logger_without_critical_uses_error(self):
        class Minimal:
            def __init__(self):
                self.calls = []

            def error(self, msg, **kwargs):
                self.calls.append((msg, kwargs))

        logger = Minimal()
        log_at(logger, LogLevel.CRITICAL, "bad")
        assert logger.calls == [("bad", {"severity": "critical"})]
