import threading
import time

import pytest

from playdiag.common.concurrency.thread_manager import JoinCancelled, ThreadManager


def test_join_returns_results_by_name_in_submission_order():
    with ThreadManager(name="t", max_workers=3) as tm:
        tm.submit("slow", lambda: (time.sleep(0.05), "a")[1])
        tm.submit("fast", lambda x: x * 2, 21)
        results = tm.join()
    assert list(results) == ["slow", "fast"]
    assert results == {"slow": "a", "fast": 42}
    stats = tm.stats()
    assert stats.tasks_submitted == 2
    assert stats.tasks_completed == 2
    assert stats.in_flight == 0


def test_join_propagates_task_exception():
    def boom():
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        with ThreadManager(name="t", max_workers=2) as tm:
            tm.submit("ok", lambda: 1)
            tm.submit("bad", boom)
            tm.join()


def test_join_raises_when_cancel_event_is_set():
    gate = threading.Event()
    cancel = threading.Event()

    with ThreadManager(name="t", max_workers=1) as tm:
        tm.submit("blocked", gate.wait, 5)
        tm.submit("queued", lambda: "never")
        cancel.set()
        try:
            with pytest.raises(JoinCancelled):
                tm.join(cancel)
        finally:
            gate.set()
    assert tm.stop_event.is_set()


def test_duplicate_task_name_rejected():
    with ThreadManager(name="t") as tm:
        tm.submit("x", lambda: 1)
        with pytest.raises(ValueError):
            tm.submit("x", lambda: 2)
        tm.join()


def test_submit_after_shutdown_rejected():
    tm = ThreadManager(name="t")
    tm.shutdown()
    tm.shutdown()  # idempotent
    with pytest.raises(RuntimeError):
        tm.submit("late", lambda: 1)


def test_exit_on_error_path_does_not_wait_for_running_tasks():
    gate = threading.Event()
    started = time.monotonic()
    try:
        with pytest.raises(JoinCancelled):
            with ThreadManager(name="t", max_workers=2) as tm:
                tm.submit("stuck", gate.wait, 5)
                cancel = threading.Event()
                cancel.set()
                tm.join(cancel)
        assert time.monotonic() - started < 2
        assert tm.stop_event.is_set()
    finally:
        gate.set()
