# dirloader/events.py
"""
Synchronous in-process event notification.

Listeners are plain callables kept per event name in registration order.
`emit` calls them inline; nothing is queued and listener exceptions
propagate to whoever emitted the event.
"""
from collections import defaultdict
from typing import Any, Callable, Dict, List

import structlog

log = structlog.get_logger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    # fan-out listener registry owned by a single object.
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> "EventEmitter":
        self._listeners[event].append(listener)
        return self

    add_listener = on

    def once(self, event: str, listener: Listener) -> "EventEmitter":
        # registers a listener that removes itself after the first call.
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            self.off(event, _wrapper)
            return listener(*args, **kwargs)

        _wrapper.listener = listener  # type: ignore[attr-defined]
        return self.on(event, _wrapper)

    def off(self, event: str, listener: Listener) -> "EventEmitter":
        registered = self._listeners.get(event)
        if not registered:
            return self
        for i, candidate in enumerate(registered):
            # == rather than `is`: bound methods are new objects on each access.
            if candidate == listener or getattr(candidate, "listener", None) == listener:
                del registered[i]
                break
        if not registered:
            del self._listeners[event]
        return self

    remove_listener = off

    def listeners(self, event: str) -> List[Listener]:
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """
        Calls every listener registered for `event` with the given arguments.

        Returns True if at least one listener was called. The listener list is
        copied first so listeners may unsubscribe while being notified.
        """
        registered = self.listeners(event)
        if not registered:
            return False
        log.debug("event_emitted", event_name=event, listener_count=len(registered))
        for listener in registered:
            listener(*args, **kwargs)
        return True
