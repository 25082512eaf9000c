from __future__ import annotations

import logging
import os
import threading

import pytest

from psearch.models.enums import PoolState
from psearch.pool import PoolShutdownError, WorkerPool


def _gate_task(started: threading.Event, release: threading.Event):
    def task() -> None:
        started.set()
        release.wait(timeout=5)

    return task


class TestConstruction:
    def test_default_size_matches_cpu_count(self) -> None:
        with WorkerPool() as pool:
            assert pool.size == (os.cpu_count() or 1)

    def test_size_clamped_to_one(self) -> None:
        with WorkerPool(0) as pool:
            assert pool.size == 1

    def test_thread_start_failure_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        original_start = threading.Thread.start
        started: list[threading.Thread] = []

        def flaky_start(self: threading.Thread) -> None:
            if started:
                raise RuntimeError("can't start new thread")
            original_start(self)
            started.append(self)

        monkeypatch.setattr(threading.Thread, "start", flaky_start)
        with pytest.raises(RuntimeError, match="can't start new thread"):
            WorkerPool(4)

        # The one worker that did start was shut down and joined before the error surfaced.
        assert len(started) == 1
        assert not started[0].is_alive()


class TestExecution:
    def test_every_task_runs_exactly_once(self) -> None:
        seen: list[int] = []
        lock = threading.Lock()

        def make(idx: int):
            def task() -> None:
                with lock:
                    seen.append(idx)

            return task

        with WorkerPool(4) as pool:
            for idx in range(500):
                pool.submit(make(idx))
            assert pool.join(timeout=10)
            assert pool.completed == 500

        assert sorted(seen) == list(range(500))

    def test_concurrent_submitters(self) -> None:
        count = 0
        lock = threading.Lock()

        def task() -> None:
            nonlocal count
            with lock:
                count += 1

        with WorkerPool(4) as pool:

            def producer() -> None:
                for _ in range(100):
                    pool.submit(task)

            producers = [threading.Thread(target=producer) for _ in range(8)]
            for t in producers:
                t.start()
            for t in producers:
                t.join()
            assert pool.join(timeout=10)

        assert count == 800

    def test_task_may_submit_more_work(self) -> None:
        done: list[str] = []
        lock = threading.Lock()

        with WorkerPool(2) as pool:

            def child() -> None:
                with lock:
                    done.append("child")

            def parent() -> None:
                for _ in range(5):
                    pool.submit(child)
                with lock:
                    done.append("parent")

            pool.submit(parent)
            assert pool.join(timeout=10)
            assert done.count("child") == 5
            assert done.count("parent") == 1

    def test_failing_task_is_logged_and_counted(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR, logger="psearch")
        ran: list[int] = []

        def boom() -> None:
            raise ValueError("boom")

        with WorkerPool(1) as pool:
            pool.submit(boom)
            pool.submit(lambda: ran.append(1))
            assert pool.join(timeout=10)
            assert pool.failed == 1
            assert pool.completed == 2

        assert ran == [1]
        assert any("raised" in rec.getMessage() for rec in caplog.records)

    def test_join_times_out_while_tasks_run(self) -> None:
        started = threading.Event()
        release = threading.Event()
        with WorkerPool(1) as pool:
            pool.submit(_gate_task(started, release))
            assert started.wait(timeout=5)
            assert pool.join(timeout=0.05) is False
            release.set()
            assert pool.join(timeout=5) is True

    def test_join_with_no_tasks_returns_immediately(self) -> None:
        with WorkerPool(2) as pool:
            assert pool.join(timeout=1)


class TestShutdown:
    def test_drains_queued_tasks_before_stopping(self) -> None:
        started = threading.Event()
        release = threading.Event()
        count = 0
        lock = threading.Lock()

        def task() -> None:
            nonlocal count
            with lock:
                count += 1

        pool = WorkerPool(1)
        pool.submit(_gate_task(started, release))
        assert started.wait(timeout=5)
        for _ in range(20):
            pool.submit(task)

        pool.shutdown(wait=False)
        assert pool.state is PoolState.DRAINING
        release.set()
        pool.shutdown(wait=True)

        assert pool.state is PoolState.STOPPED
        assert count == 20
        assert pool.completed == 21

    def test_submit_after_shutdown_is_rejected(self) -> None:
        pool = WorkerPool(2)
        pool.shutdown()
        with pytest.raises(PoolShutdownError):
            pool.submit(lambda: None)

    def test_shutdown_is_idempotent(self) -> None:
        pool = WorkerPool(2)
        pool.shutdown()
        pool.shutdown()
        assert pool.state is PoolState.STOPPED

    def test_context_manager_drains_on_exit(self) -> None:
        results: list[int] = []
        lock = threading.Lock()

        def task() -> None:
            with lock:
                results.append(1)

        with WorkerPool(3) as pool:
            for _ in range(50):
                pool.submit(task)

        assert len(results) == 50
        assert pool.state is PoolState.STOPPED


class TestBackpressure:
    def test_submit_blocks_when_queue_is_full(self) -> None:
        started = threading.Event()
        release = threading.Event()

        with WorkerPool(1, max_pending=2) as pool:
            pool.submit(_gate_task(started, release))
            assert started.wait(timeout=5)
            pool.submit(lambda: None)
            pool.submit(lambda: None)

            blocked = threading.Thread(target=pool.submit, args=(lambda: None,))
            blocked.start()
            blocked.join(timeout=0.1)
            assert blocked.is_alive()
            assert pool.pending == 2

            release.set()
            blocked.join(timeout=5)
            assert not blocked.is_alive()
            assert pool.join(timeout=5)
            assert pool.completed == 4
