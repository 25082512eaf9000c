from __future__ import annotations

from collections.abc import Sequence


def progress_percent(processed: int, total: int) -> float:
    if total <= 0:
        return 100.0
    return min(processed, total) / total * 100


def format_progress(processed: int, total: int) -> str:
    return f"{progress_percent(processed, total):.1f}% ({processed}/{total} files)"


def format_lines(lines: Sequence[int]) -> str:
    return ", ".join(str(n) for n in lines)


def format_elapsed(seconds: float) -> str:
    return f"{seconds:.3f}"
