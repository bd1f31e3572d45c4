"""The ``HttpApplication`` host object.

Applications subclass ``HttpApplication`` and opt into lifecycle events by
declaring methods with conventional names, for example::

    class Global(HttpApplication):
        def Application_Start(self):
            ...

        def application_begin_request(self, sender, e):
            ...

The event factory discovers those methods once per subclass and subscribes
them to the events owned by each instance.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..util.error import ApplicationStateError
from .context import HttpContext
from .events import Event, EventArgs

# attribute name -> event name
EVENTS: Dict[str, str] = {
    "disposed": "Disposed",
    "error": "Error",
    "begin_request": "BeginRequest",
    "authenticate_request": "AuthenticateRequest",
    "authorize_request": "AuthorizeRequest",
    "resolve_request_cache": "ResolveRequestCache",
    "acquire_request_state": "AcquireRequestState",
    "pre_request_handler_execute": "PreRequestHandlerExecute",
    "post_request_handler_execute": "PostRequestHandlerExecute",
    "release_request_state": "ReleaseRequestState",
    "update_request_cache": "UpdateRequestCache",
    "end_request": "EndRequest",
    "pre_send_request_headers": "PreSendRequestHeaders",
    "session_start": "SessionStart",
    "session_end": "SessionEnd",
}


class HttpApplication:
    """Host for application-level request lifecycle events.

    One instance processes at most one request at a time; the hosting pool
    hands out instances and attaches the request context around each request.
    """

    disposed: Event
    error: Event
    begin_request: Event
    authenticate_request: Event
    authorize_request: Event
    resolve_request_cache: Event
    acquire_request_state: Event
    pre_request_handler_execute: Event
    post_request_handler_execute: Event
    release_request_state: Event
    update_request_cache: Event
    end_request: Event
    pre_send_request_headers: Event
    session_start: Event
    session_end: Event

    def __init__(self) -> None:
        self._events: Dict[str, Event] = {}
        for attr, name in EVENTS.items():
            event = Event(name)
            setattr(self, attr, event)
            self._events[name.lower()] = event
        self._context: Optional[HttpContext] = None
        self._is_disposed = False

    def event(self, name: str) -> Event:
        """Look up an event by its name (``"BeginRequest"``), case-insensitively."""
        try:
            return self._events[name.lower()]
        except KeyError:
            raise KeyError(f"{type(self).__name__} has no event named {name!r}") from None

    @property
    def context(self) -> HttpContext:
        if self._context is None:
            raise ApplicationStateError("HttpApplication is not processing a request")
        return self._context

    @property
    def has_context(self) -> bool:
        return self._context is not None

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def attach(self, context: HttpContext) -> None:
        if self._context is not None:
            raise ApplicationStateError("HttpApplication is already processing a request")
        self._context = context

    def detach(self) -> None:
        self._context = None

    def complete_request(self) -> None:
        """Skip the remaining pipeline events and go straight to EndRequest."""
        self.context.completed = True

    def dispose(self) -> None:
        """Fire the Disposed event; later calls do nothing."""
        if self._is_disposed:
            return
        self._is_disposed = True
        self.disposed.fire(self, EventArgs.empty)
