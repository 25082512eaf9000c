# Parallel text search over a directory tree.
#
# Lifecycle (search method):
#   1. Validate root path.
#   2. Enumeration pass: count regular files into total_files (skipped in
#      single-pass mode, where the total grows as files are dispatched).
#   3. Dispatch pass: a fresh walk submits one task per regular file.  If the
#      tree grew between passes total_files is raised to match; once dispatch
#      ends it is pinned to the number of submitted tasks.
#   4. Workers run search_in_file: match lines, append a FileMatch under the
#      results lock, bump files_processed.
#   5. pool.join() is the completion barrier: it returns once every submitted
#      task is accounted for, so a tree mutated mid-scan cannot hang the caller.
#
# Shared state: the results list has its own lock, separate from the pool's
# queue lock.  The progress counters are AtomicCounters.

from __future__ import annotations

import functools
import logging
import threading
import time

from result import Err, Ok

from psearch.models.enums import SearchErrorCode
from psearch.models.search import (
    FileMatch,
    ProgressCallback,
    SearchError,
    SearchResult,
    SearchSnapshot,
    SearchStats,
)
from psearch.pool import WorkerPool
from psearch.services.counters import AtomicCounter
from psearch.services.fs import DEFAULT_FS, FileSystem
from psearch.services.matcher import encode_term, match_lines

logger = logging.getLogger(__name__)


def resolve_root(path: str, fs: FileSystem) -> str | SearchError:
    """Validate and resolve a search root path.

    Returns the resolved absolute path, or a ``SearchError`` on failure.
    """
    expanded = fs.expanduser(path)
    if not fs.exists(expanded):
        return SearchError(
            code=SearchErrorCode.NOT_FOUND,
            path=expanded,
            message="Directory does not exist",
        )
    resolved = fs.absolute(expanded)
    if not fs.is_dir(resolved):
        return SearchError(
            code=SearchErrorCode.NOT_DIRECTORY,
            path=resolved,
            message="Path is not a directory",
        )
    return resolved


class ParallelScanner:
    """Searches every regular file under a root for a literal term, one pool task per file."""

    def __init__(self, pool: WorkerPool, fs: FileSystem = DEFAULT_FS, *, single_pass: bool = False) -> None:
        self._pool = pool
        self._fs = fs
        self._single_pass = single_pass

    def count_files(self, root: str) -> int:
        return sum(1 for _, is_file in self._fs.walk(root) if is_file)

    def search(
        self,
        path: str,
        term: str,
        progress_callback: ProgressCallback | None = None,
    ) -> SearchResult:
        resolved = resolve_root(path, self._fs)
        if isinstance(resolved, SearchError):
            return Err(resolved)
        root = resolved

        needle = encode_term(term)
        total_files = AtomicCounter()
        files_processed = AtomicCounter()
        unreadable = AtomicCounter()
        matches: list[FileMatch] = []
        matches_lock = threading.Lock()

        def search_in_file(file_path: str) -> None:
            try:
                lines = match_lines(self._fs.iter_lines(file_path), needle)
            except OSError as exc:
                # Unreadable files count as processed with no match.
                unreadable.increment()
                logger.debug("Skipping unreadable file %s: %s", file_path, exc)
                lines = []
            if lines:
                with matches_lock:
                    matches.append(FileMatch(path=file_path, lines=tuple(lines)))
            done = files_processed.increment()
            if progress_callback is not None:
                progress_callback(done, total_files.value)

        logger.info("Searching %s for %r with %d workers", root, term, self._pool.size)
        submitted = 0
        try:
            if not self._single_pass:
                total_files.set(self.count_files(root))
                logger.debug("Counted %d files under %s", total_files.value, root)

            start = time.perf_counter()
            for file_path, is_file in self._fs.walk(root):
                if not is_file:
                    continue
                submitted += 1
                total_files.raise_to(submitted)
                self._pool.submit(functools.partial(search_in_file, file_path))
        except OSError as exc:
            self._pool.join()
            return Err(
                SearchError(
                    code=SearchErrorCode.TRAVERSAL_FAILED,
                    path=root,
                    message=f"Cannot traverse directory: {exc}",
                )
            )

        total_files.set(submitted)
        self._pool.join()
        elapsed = time.perf_counter() - start
        # The pinned total may be lower than the one the last task reported.
        if progress_callback is not None:
            progress_callback(files_processed.value, submitted)

        stats = SearchStats(
            total_files=total_files.value,
            files_processed=files_processed.value,
            files_matched=len(matches),
            unreadable_files=unreadable.value,
            elapsed_seconds=elapsed,
        )
        logger.info(
            "Processed %d/%d files in %.3fs, %d matched",
            stats.files_processed,
            stats.total_files,
            elapsed,
            stats.files_matched,
        )
        return Ok(SearchSnapshot(matches=list(matches), stats=stats))
