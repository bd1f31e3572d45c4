"""Discovers conventional event methods and wires them to application instances."""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterator, Optional

from ..application import EventHandler, HttpApplication
from .cache import TypeBindingCache, TypeBindings
from .conventions import Convention, ConventionKind, SpecialHook, classify
from .reporter import BindingOutcome, OutcomeReporter
from .signature import BindableHandler, create_handler, type_name


def iter_methods(cls: type) -> Iterator[tuple[str, Callable[..., Any]]]:
    """Yield each instance method visible on ``cls`` exactly once.

    Walks the MRO from the most derived class so overrides shadow their bases.
    Static methods, class methods and non-function attributes are skipped but
    still shadow base-class methods of the same name.
    """
    seen: set[str] = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if inspect.isfunction(attr):
                yield name, attr


def _wiring(convention: Convention, bind: BindableHandler) -> Callable[[HttpApplication], None]:
    def wire(app: HttpApplication) -> None:
        handler: EventHandler = bind(app)
        convention.subscribe(app, handler)

    return wire


class HttpApplicationEventFactory:
    """Prepares ``HttpApplication`` instances.

    The first instance of each subclass triggers a scan of that subclass; the
    resulting bindings are cached and replayed for every later instance.
    """

    def __init__(self, reporter: Optional[OutcomeReporter] = None) -> None:
        self.reporter = reporter or OutcomeReporter()
        self._cache: TypeBindingCache[HttpApplication] = TypeBindingCache()

    def initialize_events(self, app: HttpApplication) -> None:
        """Fire the start/init hooks for ``app`` and subscribe its event handlers."""
        bindings = self._cache.get_or_add(type(app), self._create_bindings, app)

        bindings.fire_init(app)
        bindings.initialize(app)

    prepare = initialize_events

    def bindings_for(self, cls: type) -> Optional[TypeBindings]:
        return self._cache.get(cls)

    def _create_bindings(self, cls: type, app: HttpApplication) -> TypeBindings:
        bindings = self.build_bindings(cls)

        # Runs before the bindings are published, so no instance of the type
        # finishes preparation ahead of Application_Start.
        bindings.fire_start(app)

        return bindings

    def build_bindings(self, cls: type) -> TypeBindings:
        """Scan ``cls`` and report every method whose name is a convention."""
        name_of_type = type_name(cls)
        start: Optional[BindableHandler] = None
        init: Optional[BindableHandler] = None
        wiring: list[Callable[[HttpApplication], None]] = []

        for name, function in iter_methods(cls):
            convention = classify(name)
            if convention is None:
                continue

            outcome = BindingOutcome.NONE
            if convention.kind is ConventionKind.UNSUPPORTED:
                outcome = BindingOutcome.NOT_SUPPORTED
            else:
                bind = create_handler(cls, name, function)
                if bind is None:
                    outcome = BindingOutcome.INVALID_SIGNATURE
                elif convention.kind is ConventionKind.WIREABLE:
                    wiring.append(_wiring(convention, bind))
                    outcome = BindingOutcome.REGISTERED
                elif convention.hook is SpecialHook.START:
                    start = bind
                    outcome = BindingOutcome.REGISTERED
                elif convention.hook is SpecialHook.INIT:
                    init = bind
                    outcome = BindingOutcome.REGISTERED

            self.reporter.report(name_of_type, name, outcome)

        return TypeBindings(application_start=start, application_init=init, wiring=tuple(wiring))
