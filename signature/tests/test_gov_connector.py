"""Government connector stub with an injected scheduler."""
from __future__ import annotations

import threading

from signature.logic.gov_connector import GovConnector, timer_scheduler


class FakeScheduler:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, delay_ms, callback):
        self.calls.append((delay_ms, callback))

    def run_pending(self) -> None:
        calls, self.calls = self.calls, []
        for _, cb in calls:
            cb()


def test_connect_sets_flag_after_delay(store, event_logger) -> None:
    sched = FakeScheduler()
    done = []
    conn = GovConnector(store, scheduler=sched, logger=event_logger)

    assert conn.connect(on_done=done.append) is True
    assert conn.is_pending
    assert not conn.is_connected
    assert sched.calls[0][0] == 2000

    sched.run_pending()
    assert conn.is_connected
    assert store.is_gov_connected()
    assert done == [True]
    assert not conn.is_pending


def test_connect_twice_is_noop(store, event_logger) -> None:
    sched = FakeScheduler()
    conn = GovConnector(store, scheduler=sched, logger=event_logger)
    conn.connect()
    assert conn.connect() is False
    assert len(sched.calls) == 1
    sched.run_pending()
    assert conn.connect() is False


def test_disconnect_clears_immediately(store, event_logger) -> None:
    sched = FakeScheduler()
    conn = GovConnector(store, delay_ms=10, scheduler=sched, logger=event_logger)
    conn.connect()
    sched.run_pending()
    conn.disconnect()
    assert not conn.is_connected
    assert [e.event for e in event_logger.query_logs(feature="GovConnector")] == ["Disconnected", "Connected"]


def test_timer_scheduler_runs_callback() -> None:
    fired = threading.Event()
    timer_scheduler(1, fired.set)
    assert fired.wait(2.0)
