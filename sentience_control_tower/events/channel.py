"""Observer channels for the command/event protocol.

A channel delivers each event synchronously, on the calling thread, to
every listener in registration order. By default the first listener error
propagates and later listeners are skipped. A channel created with
``isolate_errors=True`` logs listener errors and keeps going; the most
recent MAX_RECORDED_ERRORS of them are kept in ``errors``.
"""

import threading
from collections import deque
from typing import Any, Callable, Deque, List, Optional

from sentience_protocols import LoggerProtocol
from sentience_shared.errors import LISTENER_FAILED
from sentience_shared.logging import get_component_logger

Listener = Callable[..., Any]

# Listener errors kept per isolating channel; older ones are discarded
MAX_RECORDED_ERRORS = 100


class EventChannel:
    """An ordered list of listeners for one event.

    Usage:
        effect_complete = EventChannel("effect_complete")
        effect_complete.subscribe(on_done)
        effect_complete.fire(EffectorEventArgs(effector, command))
    """

    def __init__(
        self,
        name: str,
        isolate_errors: bool = False,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._name = name
        self._isolate_errors = isolate_errors
        self._logger = get_component_logger("EventChannel", logger).bind(channel=name)
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self.errors: Deque[Exception] = deque(maxlen=MAX_RECORDED_ERRORS)

    @property
    def name(self) -> str:
        return self._name

    @property
    def isolate_errors(self) -> bool:
        return self._isolate_errors

    @property
    def listeners(self) -> List[Listener]:
        """Snapshot of the registered listeners, in order."""
        with self._lock:
            return list(self._listeners)

    def subscribe(self, listener: Listener) -> None:
        """Register a listener. Registering it again does nothing."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def fire(self, *args: Any, **kwargs: Any) -> int:
        """Deliver an event to every listener registered at call time.

        Returns:
            Number of listeners the event was delivered to
        """
        snapshot = self.listeners
        for listener in snapshot:
            if not self._isolate_errors:
                listener(*args, **kwargs)
                continue
            try:
                listener(*args, **kwargs)
            except Exception as e:
                self.errors.append(e)
                self._logger.error(
                    "listener_failed",
                    code=LISTENER_FAILED,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return len(snapshot)

    def clear_errors(self) -> None:
        """Forget the recorded listener errors."""
        self.errors.clear()

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __repr__(self) -> str:
        return f"EventChannel({self._name!r}, listeners={len(self)})"


__all__ = [
    "Listener",
    "MAX_RECORDED_ERRORS",
    "EventChannel",
]
