import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.errors import NavigationFailed, ScriptExecutionFailed
from core.navigation import NavigationController
from fakes import FakeSession, SleepRecorder


class CountdownLog:
    def __init__(self):
        self.events = []

    def countdown_started(self, message, seconds):
        self.events.append(("start", seconds))

    def countdown_tick(self, message, second, total):
        self.events.append(("tick", second))

    def countdown_finished(self, message):
        self.events.append(("done",))


def test_goto_then_settle():
    events = []
    sleep = SleepRecorder(events)
    session = FakeSession(events=events)
    NavigationController(sleep=sleep).goto_and_settle(session, "http://localhost:8080/", 3)
    assert events == [("goto", "http://localhost:8080/"), ("sleep", 3)]

def test_zero_settle_does_not_sleep():
    sleep = SleepRecorder()
    NavigationController(sleep=sleep).goto_and_settle(FakeSession(), "http://localhost/", 0)
    assert sleep.calls == []

def test_countdown_keeps_total_settle_time():
    sleep = SleepRecorder()
    reporter = CountdownLog()
    NavigationController(sleep=sleep, reporter=reporter).goto_and_settle(FakeSession(), "http://localhost/", 3)
    assert sleep.total == 3
    assert reporter.events == [("start", 3), ("tick", 1), ("tick", 2), ("tick", 3), ("done",)]

def test_navigation_error_is_wrapped():
    session = FakeSession(goto_error="net::ERR_CONNECTION_REFUSED")
    sleep = SleepRecorder()
    with pytest.raises(NavigationFailed) as excinfo:
        NavigationController(sleep=sleep).goto_and_settle(session, "http://localhost:1/", 5)
    assert "ERR_CONNECTION_REFUSED" in str(excinfo.value)
    assert sleep.calls == []

def test_run_script_waits_grace_period():
    events = []
    session = FakeSession(events=events)
    NavigationController(sleep=SleepRecorder(events)).run_script(session, "document.body.remove()")
    assert events == [("execute", "document.body.remove()"), ("sleep", 0.5)]

def test_script_error_surfaces_verbatim():
    session = FakeSession(script_error="ReferenceError: nope is not defined")
    sleep = SleepRecorder()
    with pytest.raises(ScriptExecutionFailed) as excinfo:
        NavigationController(sleep=sleep).run_script(session, "nope()")
    assert "ReferenceError: nope is not defined" in str(excinfo.value)
    assert sleep.calls == []
