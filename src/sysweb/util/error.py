"""Error types and formatting helpers."""

import traceback
from typing import Any


class SyswebError(Exception):
    """Base class for sysweb errors."""


class BindingError(SyswebError):
    """A scanned method could not be bound to an application instance.

    Raised while wiring an instance; it is a programming error and is never
    recovered by the event factory.
    """

    def __init__(self, type_name: str, method_name: str, reason: str):
        self.type_name = type_name
        self.method_name = method_name
        super().__init__(f"Cannot bind {type_name}.{method_name}: {reason}")


class ApplicationStateError(SyswebError):
    """An application member was used outside of the state it requires."""


def format_unknown_error(error: Any) -> str:
    """Format any error into a string, including the traceback when present."""
    if isinstance(error, BaseException):
        if error.__traceback__ is not None:
            return "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"{error.__class__.__name__}: {error}"
    return str(error)
