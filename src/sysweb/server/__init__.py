"""ASGI hosting for ``HttpApplication`` subclasses."""

from .app import create_app
from .middleware import AccessLogMiddleware, HttpApplicationMiddleware
from .pool import ApplicationPool

__all__ = ["AccessLogMiddleware", "ApplicationPool", "HttpApplicationMiddleware", "create_app"]
