"""Signature matching for conventional event methods.

Two shapes are accepted, both returning None:

* ``def Application_BeginRequest(self)``
* ``def Application_BeginRequest(self, sender, e)`` where ``sender`` is
  unannotated, ``object`` or ``Any`` and ``e`` is unannotated or ``EventArgs``

A match produces a ``BindableHandler``: a function taking an application
instance and returning the ``(sender, e)`` handler bound to that instance.
The scan runs once per type while handlers are bound per instance.
"""

from __future__ import annotations

import inspect
import types
from inspect import Parameter, Signature
from typing import Any, Callable, Optional

from ..application import EventArgs, EventHandler, HttpApplication
from ..util.error import BindingError

BindableHandler = Callable[[HttpApplication], EventHandler]

_POSITIONAL = (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
_VOID = (Signature.empty, None, type(None), "None")
_SENDER = (Parameter.empty, object, Any, "object", "Any", "typing.Any")
_EVENT_ARGS = (Parameter.empty, EventArgs, "EventArgs")


def type_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _signature(function: Callable[..., Any]) -> Signature:
    try:
        return inspect.signature(function, eval_str=True)
    except (NameError, AttributeError, SyntaxError, TypeError):
        # Unresolvable string annotations are compared by their text.
        return inspect.signature(function)


def _is(annotation: Any, accepted: tuple[Any, ...]) -> bool:
    return any(annotation is item or (isinstance(item, str) and annotation == item) for item in accepted)


def _bind(owner: type, name: str, function: Callable[..., Any], app: HttpApplication) -> Callable[..., None]:
    if not isinstance(app, owner):
        raise BindingError(type_name(owner), name, f"{type_name(type(app))} is not a subclass")
    if not callable(function):
        raise BindingError(type_name(owner), name, "member is not callable")
    return types.MethodType(function, app)


def _no_args(owner: type, name: str, function: Callable[..., Any]) -> BindableHandler:
    def bind(app: HttpApplication) -> EventHandler:
        method = _bind(owner, name, function, app)

        def handler(sender: object, e: EventArgs) -> None:
            method()

        return handler

    return bind


def _forwarding(owner: type, name: str, function: Callable[..., Any]) -> BindableHandler:
    def bind(app: HttpApplication) -> EventHandler:
        return _bind(owner, name, function, app)

    return bind


def create_handler(owner: type, name: str, function: Callable[..., Any]) -> Optional[BindableHandler]:
    """Return a bindable handler for ``function``, or None if its shape is not accepted."""
    if inspect.iscoroutinefunction(function) or inspect.isgeneratorfunction(function):
        return None
    if inspect.isasyncgenfunction(function):
        return None

    try:
        signature = _signature(function)
    except ValueError:
        return None

    if not _is(signature.return_annotation, _VOID):
        return None

    params = list(signature.parameters.values())
    if not params or params[0].kind not in _POSITIONAL:
        return None
    params = params[1:]

    for param in params:
        if param.kind not in _POSITIONAL or param.default is not Parameter.empty:
            return None

    if not params:
        return _no_args(owner, name, function)

    if len(params) == 2:
        sender, e = params
        if _is(sender.annotation, _SENDER) and _is(e.annotation, _EVENT_ARGS):
            return _forwarding(owner, name, function)

    return None
