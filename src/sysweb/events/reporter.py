"""Structured log records for scanned convention methods."""

from __future__ import annotations

from enum import Enum

from ..util.log import Log, Logger


class BindingOutcome(str, Enum):
    NONE = "none"
    REGISTERED = "registered"
    NOT_SUPPORTED = "not_supported"
    INVALID_SIGNATURE = "invalid_signature"


class OutcomeReporter:
    """Writes one record per scanned method whose name is a convention."""

    def __init__(self, logger: Logger | None = None) -> None:
        self.log = logger or Log.create({"service": "events"})

    def report(self, type_name: str, method_name: str, outcome: BindingOutcome) -> None:
        fields = {"application_type": type_name, "event_name": method_name}
        if outcome is BindingOutcome.REGISTERED:
            self.log.info("registered event", fields)
        elif outcome is BindingOutcome.NOT_SUPPORTED:
            self.log.warn("event is unsupported", fields)
        elif outcome is BindingOutcome.INVALID_SIGNATURE:
            self.log.warn("event has unsupported signature", fields)
