"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deferred callback execution for retry backoff and async completion.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from ..errors import SchedulerClosedError

logger = logging.getLogger("restex.runtime.scheduler")

Callback = Callable[[], None]
CancelHook = Callable[[SchedulerClosedError], None]


class Scheduler(Protocol):
    """
    Runs a callback once, no earlier than `delay_s` from now, without blocking.

    If the scheduler shuts down before a delayed callback runs, `on_cancel`
    receives a `SchedulerClosedError` instead.
    """

    def after(
        self,
        delay_s: float,
        callback: Callback,
        *,
        on_cancel: CancelHook | None = None,
    ) -> None: ...


class ThreadScheduler:
    """
    Timer thread plus worker pool.

    Delayed callbacks sit in a heap ordered by due time; a single timer thread
    hands each one to the pool once it is due. Zero-delay callbacks go to the
    pool directly. Exceptions raised by callbacks are logged, never propagated.
    Shutdown drops pending delayed callbacks and calls their cancel hooks.
    """

    def __init__(self, *, max_workers: int = 4, name: str = "restex") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=f"{name}-worker",
        )
        self._name = name
        self._heap: list[tuple[float, int, Callback, CancelHook | None]] = []
        self._seq = itertools.count()
        self._cond = threading.Condition()
        self._timer: threading.Thread | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def after(
        self,
        delay_s: float,
        callback: Callback,
        *,
        on_cancel: CancelHook | None = None,
    ) -> None:
        with self._cond:
            if self._closed:
                raise SchedulerClosedError("Scheduler has been shut down")
            if delay_s <= 0:
                self._executor.submit(self._run, callback)
                return
            due = time.monotonic() + delay_s
            heapq.heappush(self._heap, (due, next(self._seq), callback, on_cancel))
            self._ensure_timer()
            self._cond.notify()

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop accepting work; pending delayed callbacks are cancelled."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            dropped = self._heap
            self._heap = []
            self._cond.notify_all()
        if dropped:
            logger.warning("Scheduler shut down with %d delayed callbacks pending", len(dropped))
        for _, _, _, on_cancel in sorted(dropped):
            if on_cancel is not None:
                self._cancel(on_cancel)
        timer = self._timer
        if wait and timer is not None and timer is not threading.current_thread():
            timer.join()
        self._executor.shutdown(wait=wait)

    def _ensure_timer(self) -> None:
        if self._timer is None:
            self._timer = threading.Thread(
                target=self._loop,
                name=f"{self._name}-timer",
                daemon=True,
            )
            self._timer.start()

    def _loop(self) -> None:
        while True:
            with self._cond:
                while not self._closed:
                    if not self._heap:
                        self._cond.wait()
                        continue
                    wait_s = self._heap[0][0] - time.monotonic()
                    if wait_s <= 0:
                        break
                    self._cond.wait(timeout=wait_s)
                if self._closed:
                    return
                _, _, callback, _ = heapq.heappop(self._heap)
                self._executor.submit(self._run, callback)

    @staticmethod
    def _cancel(on_cancel: CancelHook) -> None:
        try:
            on_cancel(SchedulerClosedError("Scheduler shut down before the callback ran"))
        except Exception:
            logger.exception("Cancel hook failed")

    @staticmethod
    def _run(callback: Callback) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed")
