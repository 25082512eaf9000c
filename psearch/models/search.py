from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from result import Result

from psearch.models.enums import SearchErrorCode

# (files_processed, total_files)
ProgressCallback = Callable[[int, int], None]


@dataclass(slots=True, frozen=True)
class FileMatch:
    path: str
    lines: tuple[int, ...]


@dataclass(slots=True)
class SearchStats:
    total_files: int = 0
    files_processed: int = 0
    files_matched: int = 0
    unreadable_files: int = 0
    elapsed_seconds: float = 0.0


@dataclass(slots=True, frozen=True)
class SearchSnapshot:
    """Completed search.  ``matches`` is in completion order, not path order."""

    matches: list[FileMatch] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)

    def sorted_matches(self) -> list[FileMatch]:
        return sorted(self.matches, key=lambda m: m.path)

    def as_mapping(self) -> dict[str, tuple[int, ...]]:
        return {m.path: m.lines for m in self.matches}


@dataclass(slots=True, frozen=True)
class SearchError:
    code: SearchErrorCode
    path: str
    message: str


SearchResult = Result[SearchSnapshot, SearchError]
