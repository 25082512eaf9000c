# Task queue shared by the worker pool.
#
# One lock guards the deque, the outstanding counter and the shutdown flag.
# Three Conditions wrap that same lock:
#   not_empty  - workers sleep here while idle
#   not_full   - producers sleep here when a max_pending bound is set
#   all_done   - join() sleeps here until every accepted task has finished
#
# A task leaves the deque exactly once, inside get(), under the lock.  The
# caller runs it after get() returns, so task execution never holds the lock
# and a running task may put() more work without deadlocking.

from __future__ import annotations

import collections
import threading
from collections.abc import Callable
from typing import TypeAlias

Task: TypeAlias = Callable[[], None]


class QueueShutdown(Exception):
    """Raised by ``put`` once ``shutdown`` has been called."""


class _TaskQueue:
    """Unbounded (or optionally bounded) FIFO with drain-on-shutdown semantics."""

    __slots__ = (
        "_deque",
        "_lock",
        "_not_empty",
        "_not_full",
        "_all_done",
        "_outstanding",
        "_max_pending",
        "_shutdown",
    )

    def __init__(self, max_pending: int | None = None) -> None:
        self._deque: collections.deque[Task] = collections.deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._all_done = threading.Condition(self._lock)
        # Accepted but not yet finished: queued + currently executing.
        self._outstanding = 0
        self._max_pending = max_pending if max_pending is None else max(1, max_pending)
        self._shutdown = False

    def put(self, task: Task) -> None:
        with self._lock:
            if self._max_pending is not None:
                while len(self._deque) >= self._max_pending and not self._shutdown:
                    self._not_full.wait()
            if self._shutdown:
                raise QueueShutdown
            self._deque.append(task)
            self._outstanding += 1
            self._not_empty.notify(1)

    def get(self) -> Task | None:
        """Block until a task is available.  Returns None once shut down and drained."""
        with self._not_empty:
            while not self._deque:
                if self._shutdown:
                    return None
                self._not_empty.wait()
            task = self._deque.popleft()
            if self._max_pending is not None:
                self._not_full.notify(1)
            return task

    def task_done(self) -> None:
        with self._lock:
            self._outstanding -= 1
            if self._outstanding == 0:
                self._all_done.notify_all()

    def join(self, timeout: float | None = None) -> bool:
        with self._all_done:
            return self._all_done.wait_for(lambda: self._outstanding == 0, timeout=timeout)

    def shutdown(self) -> None:
        with self._lock:
            self._shutdown = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._deque)

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding
