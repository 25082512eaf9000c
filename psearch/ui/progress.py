from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from psearch.services.formatting import format_progress


class SearchProgress:
    """Live "Progress: P% (n/N files)" line, safe to update from worker threads."""

    def __init__(self, console: Console, enabled: bool = True) -> None:
        self._progress = Progress(
            TextColumn("Progress:"),
            BarColumn(),
            TextColumn("{task.fields[status]}"),
            console=console,
            disable=not enabled,
        )
        self._task_id: TaskID | None = None

    def __enter__(self) -> SearchProgress:
        self._progress.start()
        self._task_id = self._progress.add_task("search", total=None, status=format_progress(0, 0))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def update(self, processed: int, total: int) -> None:
        if self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=processed,
            total=total,
            status=format_progress(processed, total),
        )
