"""Observable base for long-lived state containers.

Stores call ``_notify()`` after every mutation. Listeners run
synchronously and in subscription order. A failing listener is logged and
never propagates into the mutation that triggered it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[[Any], None]


class StateContainer:

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception(
                    "state_listener_failed",
                    store=type(self).__name__,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
