"""Pure ASGI middleware raising ``HttpApplication`` events around each request."""

from __future__ import annotations

import secrets
import time
from typing import Callable

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import Response

from ..application import EventArgs, HttpApplication, HttpContext
from ..util.error import format_unknown_error
from ..util.log import Log
from .pool import ApplicationPool

Scope = dict
Receive = Callable
Send = Callable
Message = dict

log = Log.create({"service": "server.pipeline"})
access = Log.create({"service": "server.access"})

# Raised in this order before the downstream app handles the request.
BEFORE_HANDLER = (
    "begin_request",
    "authenticate_request",
    "authorize_request",
    "resolve_request_cache",
    "acquire_request_state",
    "pre_request_handler_execute",
)

# Raised in this order after the downstream app returned.
AFTER_HANDLER = (
    "post_request_handler_execute",
    "release_request_state",
    "update_request_cache",
)


def _header(scope: Scope, name: bytes) -> str | None:
    for key, val in scope.get("headers", []):
        if key == name:
            return val.decode("latin-1")
    return None


def _raise_all(app: HttpApplication, events: tuple[str, ...]) -> bool:
    """Fire ``events`` in order; return False once the request was completed."""
    for attr in events:
        getattr(app, attr).fire(app, EventArgs.empty)
        if app.context.completed:
            return False
    return True


class HttpApplicationMiddleware:
    """Runs each HTTP request through a pooled ``HttpApplication``.

    Event order: BeginRequest, AuthenticateRequest, AuthorizeRequest,
    ResolveRequestCache, AcquireRequestState, PreRequestHandlerExecute, the
    wrapped app, PostRequestHandlerExecute, ReleaseRequestState,
    UpdateRequestCache, EndRequest. PreSendRequestHeaders fires when the
    response starts. Error fires for an unhandled exception, before EndRequest.
    EndRequest fires even when an Error handler raises.
    """

    def __init__(self, app: Callable, pool: ApplicationPool) -> None:
        self.app = app
        self.pool = pool

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        application = self.pool.rent()
        context = HttpContext(request=Request(scope, receive))
        application.attach(context)
        scope.setdefault("state", {})["http_application"] = application
        started = False

        async def send_with_headers(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start" and not started:
                application.pre_send_request_headers.fire(application, EventArgs.empty)
                headers = MutableHeaders(raw=list(message.get("headers", [])))
                for key, value in context.response_headers.items():
                    headers.append(key, value)
                message = {**message, "headers": headers.raw}
                started = True
            await send(message)

        try:
            try:
                if _raise_all(application, BEFORE_HANDLER):
                    await self.app(scope, receive, send_with_headers)
                    _raise_all(application, AFTER_HANDLER)
            except Exception as exc:
                context.add_error(exc)
                log.error("request failed", {
                    "application_type": type(application).__qualname__,
                    "method": scope.get("method", ""),
                    "path": scope.get("path", ""),
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "traceback": format_unknown_error(exc),
                })
                application.error.fire(application, EventArgs.empty)
            finally:
                application.end_request.fire(application, EventArgs.empty)

            if context.error is not None:
                raise context.error
            if not started:
                await Response(status_code=context.status_code)(scope, receive, send_with_headers)
        finally:
            application.detach()
            self.pool.give_back(application)


class AccessLogMiddleware:
    """Generates request IDs, logs access, injects X-Request-ID header."""

    def __init__(self, app: Callable, enabled: bool = True) -> None:
        self.app = app
        self.enabled = enabled

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rid = _header(scope, b"x-request-id") or secrets.token_hex(8)
        scope.setdefault("state", {})["request_id"] = rid
        begin = time.perf_counter()
        status = 500

        async def inject(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", rid.encode()))
                message = {**message, "headers": headers}
            await send(message)

        fields = {
            "request_id": rid,
            "method": scope.get("method", ""),
            "path": scope.get("path", ""),
        }
        try:
            await self.app(scope, receive, inject)
        except Exception as exc:
            if self.enabled:
                access.error("request failed", {
                    **fields,
                    "duration_ms": int((time.perf_counter() - begin) * 1000),
                    "error": str(exc),
                })
            raise

        if self.enabled:
            access.info("request", {
                **fields,
                "status": status,
                "duration_ms": int((time.perf_counter() - begin) * 1000),
            })
