"""Shared test helpers."""

from __future__ import annotations

import threading

from sysweb.events import BindingOutcome, OutcomeReporter


class RecordingReporter(OutcomeReporter):
    """Reporter that keeps outcomes in memory instead of logging them."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[tuple[str, str, BindingOutcome]] = []
        self._lock = threading.Lock()

    def report(self, type_name: str, method_name: str, outcome: BindingOutcome) -> None:
        with self._lock:
            self.records.append((type_name, method_name, outcome))

    def outcomes(self) -> dict[str, BindingOutcome]:
        return {method: outcome for _, method, outcome in self.records}
