"""Per-type cache of discovered event bindings."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

from ..application import EventArgs, HttpApplication
from ..util.error import SyswebError
from .signature import BindableHandler

A = TypeVar("A")


@dataclass(frozen=True)
class TypeBindings:
    """Everything discovered on one ``HttpApplication`` subclass.

    Attributes:
        application_start: Fired for the first instance of the type
        application_init: Fired for every instance of the type
        wiring: Actions subscribing the type's handlers on a given instance
    """

    application_start: Optional[BindableHandler] = None
    application_init: Optional[BindableHandler] = None
    wiring: tuple[Callable[[HttpApplication], None], ...] = ()

    def fire_start(self, app: HttpApplication) -> None:
        if self.application_start is not None:
            self.application_start(app)(app, EventArgs.empty)

    def fire_init(self, app: HttpApplication) -> None:
        if self.application_init is not None:
            self.application_init(app)(app, EventArgs.empty)

    def initialize(self, app: HttpApplication) -> None:
        for wire in self.wiring:
            wire(app)


class TypeBindingCache(Generic[A]):
    """Maps application types to their bindings, computing each at most once.

    Lookups of a present type take no lock. A missing type is computed under
    a lock owned by that type, so concurrent first uses of the same type wait
    for a single computation while other types proceed independently. A
    failed computation stores nothing and the next caller retries it. A
    factory that asks for its own type again raises ``SyswebError`` instead
    of waiting on itself.
    """

    def __init__(self) -> None:
        self._records: Dict[type, TypeBindings] = {}
        self._locks: Dict[type, threading.Lock] = {}
        self._owners: Dict[type, int] = {}
        self._guard = threading.Lock()

    def get(self, cls: type) -> Optional[TypeBindings]:
        return self._records.get(cls)

    def get_or_add(
        self,
        cls: type,
        factory: Callable[[type, A], TypeBindings],
        arg: A,
    ) -> TypeBindings:
        record = self._records.get(cls)
        if record is not None:
            return record

        me = threading.get_ident()
        with self._guard:
            if self._owners.get(cls) == me:
                raise SyswebError(
                    f"bindings for {cls.__qualname__} were requested while being computed "
                    "on the same thread"
                )
            lock = self._locks.setdefault(cls, threading.Lock())

        with lock:
            record = self._records.get(cls)
            if record is not None:
                return record
            with self._guard:
                self._owners[cls] = me
            try:
                record = factory(cls, arg)
            finally:
                with self._guard:
                    self._owners.pop(cls, None)
            self._records[cls] = record

        with self._guard:
            self._locks.pop(cls, None)
        return record

    def __contains__(self, cls: object) -> bool:
        return cls in self._records

    def __len__(self) -> int:
        return len(self._records)
