"""Root conftest.py for sentience tests.

This file MUST be at the repository root for fixtures to be discovered
when running tests from any subdirectory.

Provides shared fixtures used across all test modules:
- sentience_shared/tests
- sentience_avionics/tests
- sentience_control_tower/tests
- sentience_mission_system/tests
- tests/integration
"""

import pytest
from unittest.mock import MagicMock

from sentience_protocols import LogTarget
from sentience_shared.logging import configure_logging, reset_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route log records nowhere for the duration of each test."""
    configure_logging(targets=[LogTarget.NONE], force=True)
    yield
    reset_logging()


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing.

    This fixture is used across all modules to provide a consistent
    mock logger interface for constructor injection.
    """
    logger = MagicMock()
    logger.info = MagicMock()
    logger.debug = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.critical = MagicMock()
    logger.exception = MagicMock()
    logger.metric = MagicMock()
    logger.bind = MagicMock(return_value=logger)
    return logger
