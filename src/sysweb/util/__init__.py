"""Utility modules."""

from .error import ApplicationStateError, BindingError, SyswebError, format_unknown_error
from .log import Log

__all__ = ["ApplicationStateError", "BindingError", "Log", "SyswebError", "format_unknown_error"]
