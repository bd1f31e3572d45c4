"""sysweb - System.Web style HttpApplication lifecycle events for ASGI apps."""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    """Lazy import module components."""
    if name in ("HttpApplication", "HttpContext", "Event", "EventArgs"):
        from . import application
        return getattr(application, name)
    if name == "HttpApplicationEventFactory":
        from .events import HttpApplicationEventFactory
        return HttpApplicationEventFactory
    if name in ("ApplicationPool", "create_app"):
        from . import server
        return getattr(server, name)
    if name == "Log":
        from .util.log import Log
        return Log
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "ApplicationPool",
    "Event",
    "EventArgs",
    "HttpApplication",
    "HttpApplicationEventFactory",
    "HttpContext",
    "Log",
    "create_app",
]
