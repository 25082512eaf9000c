from __future__ import annotations

from enum import Enum


class PoolState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class SearchErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    NOT_DIRECTORY = "not_directory"
    TRAVERSAL_FAILED = "traversal_failed"
