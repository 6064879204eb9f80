"""Unit tests for the shared protocol types.

Tests:
- Family enums per capability kind
- Command and event payloads
- Runtime-checkable protocols
"""

import pytest

from sentience_protocols import (
    FAMILY_TYPES,
    CapabilityKind,
    EffectorCommand,
    EffectorEventArgs,
    EffectorState,
    EffectorStatus,
    LifecycleProtocol,
    LoggerProtocol,
    LogLevel,
    ProcessorFamily,
    RobotFamily,
    SensorData,
    SensorEventArgs,
    SensorFamily,
)


# =============================================================================
# ENUMS
# =============================================================================

class TestFamilies:
    """Test the family domains."""

    def test_every_kind_has_a_family(self):
        assert set(FAMILY_TYPES) == set(CapabilityKind)

    def test_domains_are_distinct(self):
        assert FAMILY_TYPES[CapabilityKind.ROBOT] is RobotFamily
        assert FAMILY_TYPES[CapabilityKind.SENSOR] is SensorFamily
        assert FAMILY_TYPES[CapabilityKind.PROCESSOR] is ProcessorFamily

    def test_values_parse_from_strings(self):
        assert SensorFamily("displacement") is SensorFamily.DISPLACEMENT
        assert CapabilityKind("effector") is CapabilityKind.EFFECTOR

    def test_log_levels_end_with_wildcard(self):
        assert list(LogLevel)[-1] is LogLevel.ALL
        assert list(LogLevel)[0] is LogLevel.METRIC


# =============================================================================
# PAYLOADS
# =============================================================================

class TestEffectorCommand:
    """Test effector commands."""

    def test_ids_are_unique(self):
        assert EffectorCommand("stop").command_id != EffectorCommand("stop").command_id

    def test_to_dict_copies_parameters(self):
        command = EffectorCommand("move", {"speed": 1.0}, command_id="c-1")
        data = command.to_dict()
        data["parameters"]["speed"] = 9.0

        assert data["action"] == "move"
        assert data["command_id"] == "c-1"
        assert command.parameters["speed"] == 1.0

    def test_frozen(self):
        command = EffectorCommand("stop")
        with pytest.raises(AttributeError):
            command.action = "go"


class TestEffectorState:
    """Test effector state values."""

    def test_default_idle(self):
        assert EffectorState().status is EffectorStatus.IDLE

    def test_equality(self):
        assert EffectorState(EffectorStatus.BUSY) == EffectorState(EffectorStatus.BUSY)
        assert EffectorState(EffectorStatus.BUSY) != EffectorState(EffectorStatus.STUCK)


class TestSensorData:
    """Test raw sensor batches."""

    def test_as_raw(self):
        data = SensorData(bytearray(b"\x00\x01"))
        assert data.as_raw() == b"\x00\x01"
        assert isinstance(data.as_raw(), bytes)
        assert len(data) == 2

    def test_equality_by_content(self):
        assert SensorData(b"ab") == SensorData(b"ab")
        assert SensorData(b"ab") != SensorData(b"ba")
        assert hash(SensorData(b"ab")) == hash(SensorData(b"ab"))


class TestEventArgs:
    """Test event payload relays."""

    def test_override_sensor(self):
        args = SensorEventArgs(sensor="camera", data=SensorData(b"x"))
        args.override_sensor("relay")
        assert args.sensor == "relay"
        assert args.data == SensorData(b"x")

    def test_override_effector(self):
        command = EffectorCommand("stop")
        args = EffectorEventArgs(effector="arm", command=command)
        args.override_effector("relay")
        assert args.effector == "relay"
        assert args.command is command


# =============================================================================
# PROTOCOLS
# =============================================================================

class TestProtocols:
    """Test structural checks against the protocols."""

    def test_logger_protocol(self, mock_logger):
        assert isinstance(mock_logger, LoggerProtocol)

    def test_lifecycle_protocol(self):
        class Duck:
            def configure(self, config): ...
            def initialise(self): ...
            def deactivate(self): ...
            def get_configuration_type(self): ...

        assert isinstance(Duck(), LifecycleProtocol)
        assert not isinstance(object(), LifecycleProtocol)
