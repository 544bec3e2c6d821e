"""Event Manager — ordered, synchronous listener dispatch for marshalling hooks.

Invariants:
    - Listeners run in registration order, synchronously, in the caller's thread
    - Listener return values are ignored; mutation of the shared payload is the channel
    - stop_propagation() prevents later listeners from running for that event only
    - Managers are owned by a collection — no process-wide registry

Design Decisions:
    - Explicit on()/off() registration over decorator auto-discovery: every
      listener visible at its registration site
    - Listener exceptions propagate: a broken hook is a programming error
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from docmarshal.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


@dataclass
class Event:
    """One dispatch of a named hook."""
    name: str
    subject: object = None
    payload: dict[str, Any] = field(default_factory=dict)
    stopped: bool = False

    def stop_propagation(self) -> None:
        self.stopped = True


class EventManager:
    """Name -> ordered listener list."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, name: str, listener: Listener) -> "EventManager":
        if not callable(listener):
            raise InvalidArgumentError(
                f"Listener for '{name}' must be callable", "listener",
            )
        self._listeners.setdefault(name, []).append(listener)
        return self

    def off(self, name: str, listener: Listener | None = None) -> "EventManager":
        if listener is None:
            self._listeners.pop(name, None)
            return self
        remaining = [fn for fn in self._listeners.get(name, []) if fn is not listener]
        self._listeners[name] = remaining
        return self

    def listeners(self, name: str) -> list[Listener]:
        return list(self._listeners.get(name, []))

    def dispatch(self, event: Event) -> Event:
        """Call each listener as listener(event, *payload.values())."""
        for listener in self.listeners(event.name):
            listener(event, *event.payload.values())
            if event.stopped:
                logger.debug(f"Propagation of '{event.name}' stopped by {listener!r}")
                break
        return event
