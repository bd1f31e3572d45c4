"""Named host events with additive subscription.

Example:
    app.begin_request.subscribe(lambda sender, e: print("begin", sender))
    app.begin_request.fire(app)
"""

from __future__ import annotations

from typing import Callable, ClassVar, List


class EventArgs:
    """Event data passed to handlers. Carries no data of its own."""

    empty: ClassVar["EventArgs"]

    __slots__ = ()

    def __repr__(self) -> str:
        return "EventArgs()"


EventArgs.empty = EventArgs()

# (sender, event data)
EventHandler = Callable[[object, EventArgs], None]


class Event:
    """An ordered list of handlers for one named host event.

    Subscribing never removes or replaces existing handlers; the same handler
    may be subscribed more than once and then runs once per subscription.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Append ``handler`` and return a callable removing this subscription."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def fire(self, sender: object, e: EventArgs = EventArgs.empty) -> None:
        """Invoke handlers in subscription order; exceptions propagate."""
        for handler in tuple(self._handlers):
            handler(sender, e)

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Event({self.name!r}, handlers={len(self._handlers)})"
