"""Pool of prepared ``HttpApplication`` instances."""

from __future__ import annotations

import threading
from typing import Generic, List, Optional, TypeVar

from ..application import HttpApplication
from ..events import HttpApplicationEventFactory
from ..util.log import Log

log = Log.create({"service": "server.pool"})

TApp = TypeVar("TApp", bound=HttpApplication)


class ApplicationPool(Generic[TApp]):
    """Hands out application instances, one request at a time each.

    New instances are constructed and passed through the event factory before
    first use. Returned instances are kept for reuse up to ``max_retained``;
    surplus instances are disposed.
    """

    def __init__(
        self,
        application_type: type[TApp],
        events: Optional[HttpApplicationEventFactory] = None,
        max_retained: int = 16,
    ) -> None:
        if not (isinstance(application_type, type) and issubclass(application_type, HttpApplication)):
            raise TypeError(f"{application_type!r} is not an HttpApplication subclass")
        if max_retained < 0:
            raise ValueError("max_retained must be >= 0")
        self.application_type = application_type
        self.events = events or HttpApplicationEventFactory()
        self.max_retained = max_retained
        self._idle: List[TApp] = []
        self._lock = threading.Lock()
        self._closed = False
        self.created = 0

    def rent(self) -> TApp:
        with self._lock:
            if self._idle:
                return self._idle.pop()

        app = self.application_type()
        self.events.initialize_events(app)
        with self._lock:
            self.created += 1
        log.debug("created application", {"application_type": self.application_type.__qualname__})
        return app

    def give_back(self, app: TApp) -> None:
        with self._lock:
            if not self._closed and not app.is_disposed and len(self._idle) < self.max_retained:
                self._idle.append(app)
                return
        app.dispose()

    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)

    def dispose(self) -> None:
        """Dispose all idle instances; instances returned afterwards are disposed too."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for app in idle:
            app.dispose()
