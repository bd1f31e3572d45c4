from __future__ import annotations

import threading
import time

import pytest

from sysweb.application import EventArgs, HttpApplication
from sysweb.events import BindingOutcome, HttpApplicationEventFactory, iter_methods
from sysweb.util.error import BindingError, SyswebError
from tests.helpers import RecordingReporter


def _factory() -> tuple[HttpApplicationEventFactory, RecordingReporter]:
    reporter = RecordingReporter()
    return HttpApplicationEventFactory(reporter=reporter), reporter


class Counting(HttpApplication):
    starts = 0

    def __init__(self) -> None:
        super().__init__()
        self.inits = 0
        self.begins: list[object] = []

    def Application_Start(self) -> None:
        type(self).starts += 1

    def Application_Init(self) -> None:
        self.inits += 1

    def Application_BeginRequest(self) -> None:
        self.begins.append(self)


def test_begin_request_is_wired_per_instance() -> None:
    factory, reporter = _factory()

    class Global(HttpApplication):
        def __init__(self) -> None:
            super().__init__()
            self.calls = 0

        def Application_BeginRequest(self) -> None:
            self.calls += 1

    a, b = Global(), Global()
    factory.initialize_events(a)
    factory.initialize_events(b)

    a.begin_request.fire(a)

    assert a.calls == 1
    assert b.calls == 0
    assert len(a.begin_request) == 1
    assert len(b.begin_request) == 1

    registered = [r for r in reporter.records if r[2] is BindingOutcome.REGISTERED]
    assert len(registered) == 1
    assert registered[0][1] == "Application_BeginRequest"
    assert registered[0][0].endswith("Global")


def test_start_fires_once_per_type_and_init_once_per_prepare() -> None:
    factory, _ = _factory()

    class App(Counting):
        starts = 0

    first, second = App(), App()
    factory.initialize_events(first)
    factory.initialize_events(second)

    assert App.starts == 1
    assert first.inits == 1
    assert second.inits == 1


def test_start_runs_against_first_instance_before_init() -> None:
    factory, _ = _factory()
    order: list[tuple[str, object]] = []

    class App(HttpApplication):
        def Application_Start(self, sender: object, e: EventArgs) -> None:
            order.append(("start", sender))

        def Application_Init(self) -> None:
            order.append(("init", self))

    app = App()
    factory.initialize_events(app)

    assert order == [("start", app), ("init", app)]


def test_forwarding_handler_receives_sender_and_event_args() -> None:
    factory, _ = _factory()
    seen: list[tuple[object, object, EventArgs]] = []

    class App(HttpApplication):
        def Application_EndRequest(self, sender: object, e: EventArgs) -> None:
            seen.append((self, sender, e))

    app = App()
    factory.initialize_events(app)
    args = EventArgs()
    app.end_request.fire("sender", args)

    assert seen == [(app, "sender", args)]


def test_invalid_signature_is_reported_and_never_wired() -> None:
    factory, reporter = _factory()
    calls: list[object] = []

    class App(HttpApplication):
        def Application_BeginRequest(self, a: object, b: EventArgs, c: object) -> None:
            calls.append(a)

        def Application_Init(self) -> bool:
            calls.append(self)
            return True

    app = App()
    factory.initialize_events(app)
    app.begin_request.fire(app)

    assert calls == []
    assert len(app.begin_request) == 0
    assert reporter.outcomes() == {
        "Application_BeginRequest": BindingOutcome.INVALID_SIGNATURE,
        "Application_Init": BindingOutcome.INVALID_SIGNATURE,
    }


def test_unsupported_names_are_reported_not_registered() -> None:
    factory, reporter = _factory()
    calls: list[str] = []

    class App(HttpApplication):
        def Application_End(self) -> None:
            calls.append("end")

        def Application_PreSendContent(self, sender: object, e: EventArgs) -> None:
            calls.append("content")

    app = App()
    factory.initialize_events(app)
    app.dispose()

    assert calls == []
    assert reporter.outcomes() == {
        "Application_End": BindingOutcome.NOT_SUPPORTED,
        "Application_PreSendContent": BindingOutcome.NOT_SUPPORTED,
    }


def test_unmatched_methods_produce_no_report() -> None:
    factory, reporter = _factory()

    class App(HttpApplication):
        def OnBeginRequest(self) -> None:
            pass

        def helper(self, x: int) -> int:
            return x

    factory.initialize_events(App())

    assert reporter.records == []


def test_snake_case_names_are_conventions() -> None:
    factory, reporter = _factory()

    class App(HttpApplication):
        def __init__(self) -> None:
            super().__init__()
            self.errors = 0

        def application_error(self, sender, e):
            self.errors += 1

    app = App()
    factory.initialize_events(app)
    app.error.fire(app)

    assert app.errors == 1
    assert reporter.outcomes() == {"application_error": BindingOutcome.REGISTERED}


def test_inherited_methods_are_discovered_once_and_overrides_win() -> None:
    factory, reporter = _factory()
    calls: list[str] = []

    class Base(HttpApplication):
        def Application_BeginRequest(self) -> None:
            calls.append("base")

        def Application_EndRequest(self) -> None:
            calls.append("base-end")

    class Derived(Base):
        def Application_BeginRequest(self) -> None:
            calls.append("derived")

    app = Derived()
    factory.initialize_events(app)
    app.begin_request.fire(app)
    app.end_request.fire(app)

    assert calls == ["derived", "base-end"]
    assert sorted(name for _, name, _ in reporter.records) == [
        "Application_BeginRequest",
        "Application_EndRequest",
    ]


def test_static_and_class_methods_are_skipped() -> None:
    class App(HttpApplication):
        @staticmethod
        def Application_BeginRequest() -> None:
            pass

        @classmethod
        def Application_EndRequest(cls) -> None:
            pass

        def Application_Error(self) -> None:
            pass

    names = [name for name, _ in iter_methods(App)]

    assert "Application_BeginRequest" not in names
    assert "Application_EndRequest" not in names
    assert names.count("Application_Error") == 1


def test_bindings_are_cached_per_type() -> None:
    factory, reporter = _factory()

    class One(Counting):
        starts = 0

    class Two(Counting):
        starts = 0

    assert factory.bindings_for(One) is None
    factory.initialize_events(One())
    bindings = factory.bindings_for(One)
    factory.initialize_events(One())
    factory.initialize_events(Two())

    assert bindings is not None
    assert factory.bindings_for(One) is bindings
    assert factory.bindings_for(Two) is not bindings
    assert len(bindings.wiring) == 1
    assert len(reporter.records) == 6


def test_scan_is_deterministic() -> None:
    factory, reporter = _factory()

    factory.build_bindings(Counting)
    first = list(reporter.records)
    reporter.records.clear()
    factory.build_bindings(Counting)

    assert reporter.records == first


def test_concurrent_first_use_scans_once() -> None:
    class Slow(HttpApplication):
        starts = 0

        def __init__(self) -> None:
            super().__init__()
            self.inits = 0

        def Application_Start(self) -> None:
            time.sleep(0.05)
            type(self).starts += 1

        def Application_Init(self) -> None:
            self.inits += 1

        def Application_BeginRequest(self) -> None:
            pass

        def Application_End(self) -> None:
            pass

        def Application_EndRequest(self, a, b, c) -> None:
            pass

    factory, reporter = _factory()
    apps = [Slow() for _ in range(8)]
    barrier = threading.Barrier(len(apps))
    errors: list[BaseException] = []

    def run(app: Slow) -> None:
        barrier.wait()
        try:
            factory.initialize_events(app)
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=run, args=(app,)) for app in apps]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert Slow.starts == 1
    assert all(app.inits == 1 for app in apps)
    assert all(len(app.begin_request) == 1 for app in apps)
    assert sorted((name, outcome) for _, name, outcome in reporter.records) == [
        ("Application_BeginRequest", BindingOutcome.REGISTERED),
        ("Application_End", BindingOutcome.NOT_SUPPORTED),
        ("Application_EndRequest", BindingOutcome.INVALID_SIGNATURE),
        ("Application_Init", BindingOutcome.REGISTERED),
        ("Application_Start", BindingOutcome.REGISTERED),
    ]


def test_failed_start_is_retried_by_next_instance() -> None:
    factory, _ = _factory()
    attempts: list[int] = []

    class Flaky(HttpApplication):
        def Application_Start(self) -> None:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        factory.initialize_events(Flaky())
    assert factory.bindings_for(Flaky) is None

    factory.initialize_events(Flaky())

    assert len(attempts) == 2
    assert factory.bindings_for(Flaky) is not None


def test_binding_failure_propagates() -> None:
    factory, _ = _factory()

    class App(HttpApplication):
        def Application_BeginRequest(self) -> None:
            pass

    factory.initialize_events(App())
    bindings = factory.bindings_for(App)
    assert bindings is not None

    with pytest.raises(BindingError):
        bindings.initialize(HttpApplication())


def test_prepare_is_an_alias() -> None:
    assert HttpApplicationEventFactory.prepare is HttpApplicationEventFactory.initialize_events


def test_start_preparing_its_own_type_raises_instead_of_hanging() -> None:
    factory, _ = _factory()
    nested: list[bool] = []

    class SelfPreparing(HttpApplication):
        def Application_Start(self) -> None:
            if not nested:
                nested.append(True)
                factory.initialize_events(type(self)())

    with pytest.raises(SyswebError, match="SelfPreparing"):
        factory.initialize_events(SelfPreparing())
    assert factory.bindings_for(SelfPreparing) is None

    factory.initialize_events(SelfPreparing())
    assert factory.bindings_for(SelfPreparing) is not None
