"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from ..application import HttpApplication
from ..core.config import ConfigManager
from ..events import HttpApplicationEventFactory
from ..util.log import Log
from .middleware import AccessLogMiddleware, HttpApplicationMiddleware
from .pool import ApplicationPool

log = Log.create({"service": "server"})


def create_app(
    application_type: type[HttpApplication],
    *,
    max_retained: Optional[int] = None,
    access_log: bool = True,
    events: Optional[HttpApplicationEventFactory] = None,
    title: str = "sysweb",
) -> FastAPI:
    """Create a FastAPI application whose requests raise ``application_type`` events.

    Routes are added to the returned app as usual. ``max_retained`` defaults to
    ``application.maxRetained`` from configuration. Pooled instances are
    disposed when the app shuts down.
    """
    if max_retained is None:
        max_retained = ConfigManager.get().application.max_retained

    pool = ApplicationPool(application_type, events=events, max_retained=max_retained)

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("starting", {"application_type": application_type.__qualname__, "max_retained": max_retained})
        try:
            yield
        finally:
            pool.dispose()
            log.info("stopped", {"application_type": application_type.__qualname__})

    app = FastAPI(title=title, lifespan=_lifespan)
    app.state.application_pool = pool

    # Added last, so it wraps the pipeline and logs its final status.
    app.add_middleware(HttpApplicationMiddleware, pool=pool)
    app.add_middleware(AccessLogMiddleware, enabled=access_log)
    return app
