from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

log = logging.getLogger(__name__)


class JoinCancelled(Exception):
    """Raised by join() when the stop event fires before every task finished."""


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_cancelled: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        done = self.tasks_completed + self.tasks_failed + self.tasks_cancelled
        return max(0, self.tasks_submitted - done)


class ThreadManager:
    """
    A small fan-out / join helper over ThreadPoolExecutor.

    Features
    --------
    - submit(name, fn, *args, **kwargs) -> Future, tasks are keyed by name
    - join(cancel_event=None) -> {name: result}, a barrier over every submitted task
    - cancel() -> drops pending futures and sets the stop event
    - Stats snapshot
    - Clean shutdown, context manager support

    Notes
    -----
    - Tuned for a handful of I/O-bound tasks per run (ffprobe, ffmpeg, listing a directory).
    - join() never returns partial results: the first task exception or a
      cancellation propagates and the remaining futures are cancelled.
    """

    def __init__(
        self,
        name: str = "worker",
        max_workers: int = 4,
        thread_name_prefix: Optional[str] = None,
        poll_interval_sec: float = 0.05,
    ) -> None:
        """
        Parameters
        ----------
        name:
            Logical name for logging.
        max_workers:
            Max threads in the pool.
        thread_name_prefix:
            Prefix for thread names.
        poll_interval_sec:
            How often join() looks at the cancel event while waiting.
        """
        self._name = name
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix=thread_name_prefix or f"{name}",
        )
        self._stop = threading.Event()
        self._stats = ThreadStats(start_ts=time.time())
        self._poll = poll_interval_sec
        self._futures: Dict[str, Future] = {}
        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.shutdown(wait=True)
            return
        # Error or cancel path: signal running tasks through stop_event and do
        # not wait for them; their results are discarded anyway.
        self.cancel()
        self.shutdown(wait=False, cancel_futures=True)

    @property
    def stop_event(self) -> threading.Event:
        """Set by cancel(); hand it to long-running tasks so they can stop early."""
        return self._stop

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
                tasks_cancelled=self._stats.tasks_cancelled,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, name: str, fn: Callable[..., Any], /, *args, **kwargs) -> Future:
        """Submit a named callable. Names must be unique within one manager."""
        if self._closed:
            raise RuntimeError(f"{self._name}: submit() after shutdown")
        with self._lock:
            if name in self._futures:
                raise ValueError(f"{self._name}: task {name!r} already submitted")
            self._stats.tasks_submitted += 1

        fut: Future = self._executor.submit(fn, *args, **kwargs)

        def _cb(f: Future) -> None:
            with self._lock:
                if f.cancelled():
                    self._stats.tasks_cancelled += 1
                elif f.exception() is not None:
                    self._stats.tasks_failed += 1
                else:
                    self._stats.tasks_completed += 1

        fut.add_done_callback(_cb)
        with self._lock:
            self._futures[name] = fut
        return fut

    def cancel(self) -> None:
        """Set the stop flag and cancel whatever has not started yet."""
        self._stop.set()
        with self._lock:
            futures = list(self._futures.values())
        for f in futures:
            f.cancel()

    # -------------------------
    # Barrier
    # -------------------------
    def join(self, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        """
        Wait for every submitted task and return results keyed by task name,
        in submission order.

        Raises the first task exception, or JoinCancelled if `cancel_event`
        (or our own stop event) is set before everything finished.
        """
        with self._lock:
            futures = dict(self._futures)
        pending = set(futures.values())

        while pending:
            if self._stop.is_set() or (cancel_event is not None and cancel_event.is_set()):
                self.cancel()
                raise JoinCancelled(f"{self._name}: cancelled with {len(pending)} task(s) outstanding")
            done, pending = wait(pending, timeout=self._poll, return_when=FIRST_COMPLETED)
            for f in done:
                if f.cancelled():
                    self.cancel()
                    raise JoinCancelled(f"{self._name}: a task was cancelled")
                exc = f.exception()
                if exc is not None:
                    log.debug("%s task failed: %s", self._name, exc)
                    self.cancel()
                    raise exc

        # A cancel that lands after the last task finished still wins.
        if self._stop.is_set() or (cancel_event is not None and cancel_event.is_set()):
            raise JoinCancelled(f"{self._name}: cancelled")
        return {name: f.result() for name, f in futures.items()}
