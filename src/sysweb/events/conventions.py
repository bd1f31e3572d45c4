"""Conventional method names recognized on ``HttpApplication`` subclasses.

Names are matched case-insensitively and without regard to underscores, so
``Application_BeginRequest``, ``application_beginrequest`` and
``application_begin_request`` all name the same convention.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..application import EVENTS, EventHandler, HttpApplication


class ConventionKind(str, Enum):
    WIREABLE = "wireable"
    UNSUPPORTED = "unsupported"
    SPECIAL_HOOK = "special_hook"


class SpecialHook(str, Enum):
    # First time any instance of the type is prepared.
    START = "start"
    # Every time an instance is prepared.
    INIT = "init"


_EVENT_ATTRS = {name: attr for attr, name in EVENTS.items()}


@dataclass(frozen=True)
class Convention:
    name: str
    kind: ConventionKind
    event: Optional[str] = None
    hook: Optional[SpecialHook] = None

    def subscribe(self, app: HttpApplication, handler: EventHandler) -> None:
        """Attach ``handler`` to this convention's event on ``app``."""
        if self.event is None:
            raise TypeError(f"{self.name} is not bound to an event")
        getattr(app, _EVENT_ATTRS[self.event]).subscribe(handler)


def normalize(name: str) -> str:
    return name.replace("_", "").casefold()


def _wire(name: str, event: str) -> Convention:
    return Convention(name, ConventionKind.WIREABLE, event=event)


CONVENTIONS: tuple[Convention, ...] = (
    Convention("Application_Start", ConventionKind.SPECIAL_HOOK, hook=SpecialHook.START),
    Convention("Application_Init", ConventionKind.SPECIAL_HOOK, hook=SpecialHook.INIT),
    # Just before an application instance is destroyed.
    _wire("Application_Disposed", "Disposed"),
    # Unhandled exception while processing a request.
    _wire("Application_Error", "Error"),
    _wire("Application_BeginRequest", "BeginRequest"),
    _wire("Application_EndRequest", "EndRequest"),
    _wire("Application_PreRequestHandlerExecute", "PreRequestHandlerExecute"),
    _wire("Application_PostRequestHandlerExecute", "PostRequestHandlerExecute"),
    _wire("Application_PreSendRequestHeaders", "PreSendRequestHeaders"),
    _wire("Application_AcquireRequestState", "AcquireRequestState"),
    _wire("Application_ReleaseRequestState", "ReleaseRequestState"),
    _wire("Application_ResolveRequestCache", "ResolveRequestCache"),
    _wire("Application_UpdateRequestCache", "UpdateRequestCache"),
    _wire("Application_AuthenticateRequest", "AuthenticateRequest"),
    _wire("Application_AuthorizeRequest", "AuthorizeRequest"),
    _wire("Session_Start", "SessionStart"),
    _wire("Session_End", "SessionEnd"),
    # Known to System.Web but never raised by this host.
    Convention("Application_PreSendContent", ConventionKind.UNSUPPORTED),
    Convention("Application_End", ConventionKind.UNSUPPORTED),
)


def _index(conventions: Iterable[Convention]) -> Mapping[str, Convention]:
    table: dict[str, Convention] = {}
    for convention in conventions:
        key = normalize(convention.name)
        if key in table:
            raise ValueError(f"duplicate convention name: {convention.name}")
        if convention.kind is ConventionKind.WIREABLE and convention.event not in _EVENT_ATTRS:
            raise ValueError(f"{convention.name} refers to unknown event {convention.event}")
        table[key] = convention
    return MappingProxyType(table)


_TABLE = _index(CONVENTIONS)


def classify(method_name: str) -> Optional[Convention]:
    """Return the convention ``method_name`` refers to, or None when it is not one."""
    return _TABLE.get(normalize(method_name))
