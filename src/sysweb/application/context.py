"""Per-request state shared between the pipeline and application handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from starlette.datastructures import MutableHeaders
from starlette.requests import Request


@dataclass(eq=False)
class HttpContext:
    """State of one request as seen by ``HttpApplication`` handlers.

    Attributes:
        request: The incoming request
        items: Free-form per-request storage for handlers
        status_code: Status used when the pipeline itself sends the response
            (request completed early, or an error was cleared)
        response_headers: Headers appended to the response when it starts
        error: Unhandled exception raised while processing the request
        completed: Set by ``HttpApplication.complete_request``
    """

    request: Request
    items: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200
    response_headers: MutableHeaders = field(default_factory=MutableHeaders)
    error: Optional[BaseException] = None
    completed: bool = False

    def add_error(self, error: BaseException) -> None:
        self.error = error

    def clear_error(self) -> None:
        """Mark the current error as handled so the pipeline does not re-raise it."""
        self.error = None
