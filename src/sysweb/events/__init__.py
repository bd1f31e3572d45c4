"""Convention-based event binding for ``HttpApplication`` subclasses."""

from .cache import TypeBindingCache, TypeBindings
from .conventions import CONVENTIONS, Convention, ConventionKind, SpecialHook, classify
from .factory import HttpApplicationEventFactory, iter_methods
from .reporter import BindingOutcome, OutcomeReporter
from .signature import BindableHandler, create_handler

__all__ = [
    "BindableHandler",
    "BindingOutcome",
    "CONVENTIONS",
    "Convention",
    "ConventionKind",
    "HttpApplicationEventFactory",
    "OutcomeReporter",
    "SpecialHook",
    "TypeBindingCache",
    "TypeBindings",
    "classify",
    "create_handler",
    "iter_methods",
]
