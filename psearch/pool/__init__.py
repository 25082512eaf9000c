from __future__ import annotations

from psearch.pool._queue import Task
from psearch.pool.worker_pool import PoolShutdownError, WorkerPool, default_workers

__all__ = [
    "PoolShutdownError",
    "Task",
    "WorkerPool",
    "default_workers",
]
