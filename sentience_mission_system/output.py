"""User-facing output collaborator.

Output writes short messages for the operator. It is a lifecycle
component: nothing is sent before initialise() or after deactivate().
"""

import sys
from typing import Callable, Optional, TextIO

from sentience_protocols import LoggerProtocol, OutputMethod
from sentience_shared.errors import OUTPUT_CONFIGURATION_INVALID
from sentience_avionics.configuration import OutputConfiguration
from sentience_control_tower.lifecycle import SentienceComponent

DisplayCallback = Callable[[str], None]


class Output(SentienceComponent):
    """Sends text to the console, an attached display, or nowhere.

    Args:
        stream: Console stream; defaults to sys.stdout at send time
        display: Callback for the ui and line_display methods
        logger: Logger instance
    """

    configuration_type = OutputConfiguration
    configuration_error_code = OUTPUT_CONFIGURATION_INVALID

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        display: Optional[DisplayCallback] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        super().__init__(logger)
        self._stream = stream
        self._display = display

    @property
    def method(self) -> OutputMethod:
        if self.configuration is None:
            return OutputMethod.NONE
        return self.configuration.method

    def attach_display(self, display: Optional[DisplayCallback]) -> None:
        self._display = display

    def send(self, text: str) -> bool:
        """Send one message.

        Returns:
            True if the text was written somewhere
        """
        if not self.is_active:
            return False

        method = self.method
        if method == OutputMethod.CONSOLE:
            stream = self._stream or sys.stdout
            print(text, file=stream, flush=True)
            return True
        if method in (OutputMethod.UI, OutputMethod.LINE_DISPLAY) and self._display is not None:
            self._display(text)
            return True
        return False


__all__ = ["Output", "DisplayCallback"]
