from __future__ import annotations

from psearch.search.scanner import ParallelScanner, resolve_root

__all__ = [
    "ParallelScanner",
    "resolve_root",
]
