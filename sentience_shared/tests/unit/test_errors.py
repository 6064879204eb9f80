"""Unit tests for the error taxonomy.

Tests:
- Messages construction
- SentienceError fields, string form and serialization
- Logging on construction at the category's default level
- Category tags and hierarchy
"""

import pytest

from sentience_protocols import CapabilityKind, ErrorKind, LogLevel
from sentience_shared.errors import (
    SECTION_NOT_FOUND,
    ConfigurationError,
    ConfigurationSectionNotFoundError,
    DiscoveryError,
    FactoryError,
    FactoryItemNotFoundError,
    InvalidDimensionError,
    LifecycleError,
    Messages,
    RobotError,
    RobotStartupError,
    SentienceError,
)


class TestMessages:
    """Test the four-audience message set."""

    def test_of_fills_every_audience(self):
        messages = Messages.of("Something broke")
        assert messages.full == "Something broke"
        assert messages.summary == "Something broke"
        assert messages.developer == "Something broke"
        assert messages.user == "Something broke"

    def test_to_dict(self):
        messages = Messages(full="f", summary="s", developer="d", user="u")
        assert messages.to_dict() == {"full": "f", "summary": "s", "developer": "d", "user": "u"}


class TestSentienceError:
    """Test the base error."""

    def test_string_uses_summary(self, mock_logger):
        error = SentienceError(42, Messages(full="Long text", summary="Short"), logger=mock_logger)
        assert str(error) == "[42] Short"

    def test_string_falls_back_to_full(self, mock_logger):
        error = SentienceError(42, Messages(full="Only full"), logger=mock_logger)
        assert str(error) == "[42] Only full"

    def test_plain_string_message(self, mock_logger):
        error = SentienceError(1, "plain", logger=mock_logger)
        assert error.messages == Messages.of("plain")
        assert error.user_message == "plain"
        assert error.developer_message == "plain"

    def test_audience_fallbacks(self, mock_logger):
        error = SentienceError(1, Messages(full="full text", summary="sum"), logger=mock_logger)
        assert error.user_message == "sum"
        assert error.developer_message == "full text"

    def test_defaults(self, mock_logger):
        error = SentienceError(1, "x", logger=mock_logger)
        assert error.kind is ErrorKind.GENERAL
        assert error.level is LogLevel.ERROR
        assert error.timestamp.tzinfo is not None
        assert error.capability is None

    def test_cause_chained(self, mock_logger):
        cause = ValueError("inner")
        error = SentienceError(1, "outer", cause=cause, logger=mock_logger)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_logged_on_construction(self, mock_logger):
        SentienceError(
            7,
            Messages(full="f", summary="s", developer="d", user="u"),
            context={"key": "value"},
            logger=mock_logger,
        )

        mock_logger.bind.assert_called_with(component="errors")
        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args == ("sentience_error",)
        assert kwargs["code"] == 7
        assert kwargs["kind"] == "general"
        assert kwargs["severity"] == "error"
        assert kwargs["message_full"] == "f"
        assert kwargs["message_user"] == "u"
        assert kwargs["context"] == {"key": "value"}

    def test_explicit_level_overrides_default(self, mock_logger):
        error = SentienceError(1, "x", level=LogLevel.FAILURE, logger=mock_logger)
        assert error.level is LogLevel.FAILURE
        mock_logger.critical.assert_called_once()

    def test_to_dict(self, mock_logger):
        error = FactoryItemNotFoundError(
            404,
            "missing",
            capability=CapabilityKind.SENSOR,
            logger=mock_logger,
        )
        data = error.to_dict()
        assert data["kind"] == "factory_item_not_found"
        assert data["code"] == 404
        assert data["capability"] == "sensor"
        assert data["messages"]["full"] == "missing"
        assert "timestamp" in data

    def test_raisable(self, mock_logger):
        with pytest.raises(SentienceError) as exc_info:
            raise LifecycleError(701, "not configured", logger=mock_logger)
        assert exc_info.value.code == 701


class TestCategories:
    """Test category tags and hierarchy."""

    @pytest.mark.parametrize("error_type,kind,level", [
        (ConfigurationError, ErrorKind.CONFIGURATION, LogLevel.CRITICAL),
        (FactoryError, ErrorKind.FACTORY, LogLevel.ERROR),
        (FactoryItemNotFoundError, ErrorKind.FACTORY_ITEM_NOT_FOUND, LogLevel.ERROR),
        (DiscoveryError, ErrorKind.DISCOVERY, LogLevel.CRITICAL),
        (LifecycleError, ErrorKind.LIFECYCLE, LogLevel.ERROR),
        (RobotError, ErrorKind.ROBOT, LogLevel.ERROR),
        (RobotStartupError, ErrorKind.ROBOT, LogLevel.CRITICAL),
        (InvalidDimensionError, ErrorKind.ENVIRONMENT, LogLevel.ALERT),
    ])
    def test_kind_and_level(self, mock_logger, error_type, kind, level):
        error = error_type(1, "x", logger=mock_logger)
        assert error.kind is kind
        assert error.level is level

    def test_section_not_found_is_configuration_error(self, mock_logger):
        error = ConfigurationSectionNotFoundError(SECTION_NOT_FOUND, "gone", logger=mock_logger)
        assert isinstance(error, ConfigurationError)
        assert error.kind is ErrorKind.CONFIGURATION

    def test_item_not_found_is_not_factory_error(self, mock_logger):
        error = FactoryItemNotFoundError(1, "x", logger=mock_logger)
        assert not isinstance(error, FactoryError)
        assert isinstance(error, SentienceError)
