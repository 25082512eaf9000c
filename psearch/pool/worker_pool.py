from __future__ import annotations

import logging
import os
import threading
from types import TracebackType

from psearch.models.enums import PoolState
from psearch.pool._queue import QueueShutdown, Task, _TaskQueue
from psearch.services.counters import AtomicCounter

logger = logging.getLogger(__name__)


class PoolShutdownError(RuntimeError):
    """Raised when a task is submitted after shutdown has been signalled."""


def default_workers() -> int:
    return os.cpu_count() or 1


class WorkerPool:
    """Fixed set of persistent worker threads draining one FIFO task queue.

    Lifecycle: ``RUNNING`` accepts tasks; ``shutdown()`` moves to ``DRAINING``,
    where new submissions are rejected but every task already accepted still
    runs; once all workers have exited the pool is ``STOPPED``.  Leaving a
    ``with`` block calls ``shutdown(wait=True)``.
    """

    def __init__(
        self,
        workers: int | None = None,
        *,
        max_pending: int | None = None,
        name: str = "psearch-worker",
    ) -> None:
        self._size = max(1, workers if workers is not None else default_workers())
        self._queue = _TaskQueue(max_pending=max_pending)
        self._state = PoolState.RUNNING
        self._state_lock = threading.Lock()
        self._completed = AtomicCounter()
        self._failed = AtomicCounter()
        self._threads: list[threading.Thread] = []

        try:
            for idx in range(self._size):
                thread = threading.Thread(target=self._run_worker, name=f"{name}-{idx}", daemon=True)
                thread.start()
                self._threads.append(thread)
        except Exception:
            # Thread spawn failure is fatal: stop the workers that did start,
            # then let the error surface from the constructor.
            logger.error("Failed to start worker %d of %d", len(self._threads) + 1, self._size)
            self.shutdown(wait=True)
            raise

        logger.debug("Started worker pool with %d threads", self._size)

    def _run_worker(self) -> None:
        while True:
            task = self._queue.get()
            if task is None:
                break
            try:
                task()
            except Exception:  # noqa: BLE001
                # Keep the worker alive and the task accounted for so join()
                # cannot hang on a failed task.
                self._failed.increment()
                logger.exception("Task %r raised", task)
            finally:
                self._completed.increment()
                self._queue.task_done()

    def submit(self, task: Task) -> None:
        """Enqueue *task* and wake one idle worker.

        Safe to call from any thread, including from inside a running task.
        Raises ``PoolShutdownError`` once shutdown has been signalled.
        """
        try:
            self._queue.put(task)
        except QueueShutdown:
            msg = f"Cannot submit to a pool in state {self.state.value}"
            raise PoolShutdownError(msg) from None

    def join(self, timeout: float | None = None) -> bool:
        """Block until every task accepted so far has finished.  False on timeout."""
        return self._queue.join(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._state_lock:
            if self._state is PoolState.RUNNING:
                self._state = PoolState.DRAINING
                self._queue.shutdown()
        if not wait:
            return

        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()
        with self._state_lock:
            if all(not t.is_alive() for t in self._threads):
                self._state = PoolState.STOPPED

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)

    @property
    def size(self) -> int:
        return self._size

    @property
    def state(self) -> PoolState:
        with self._state_lock:
            return self._state

    @property
    def pending(self) -> int:
        return self._queue.pending

    @property
    def completed(self) -> int:
        return self._completed.value

    @property
    def failed(self) -> int:
        return self._failed.value

    def __repr__(self) -> str:
        return f"WorkerPool(size={self._size}, state={self.state.value}, pending={self.pending})"
