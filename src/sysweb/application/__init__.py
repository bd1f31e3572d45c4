"""HttpApplication host surface."""

from .context import HttpContext
from .events import Event, EventArgs, EventHandler
from .http_application import EVENTS, HttpApplication

__all__ = ["EVENTS", "Event", "EventArgs", "EventHandler", "HttpApplication", "HttpContext"]
