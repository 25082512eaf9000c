from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from psearch.models.enums import SearchErrorCode
from psearch.models.search import SearchError, SearchSnapshot
from psearch.services.formatting import format_elapsed, format_lines


def render_header(console: Console, term: str, path: str) -> None:
    console.print(f"Searching for '{escape(term)}' in {escape(path)}", highlight=False)


def render_report(console: Console, snapshot: SearchSnapshot, sort_results: bool = False) -> None:
    stats = snapshot.stats
    console.print(f"Search completed in {format_elapsed(stats.elapsed_seconds)} seconds.", highlight=False)
    console.print(f"Found [bold]{stats.files_matched}[/bold] files containing the search term.", highlight=False)

    matches = snapshot.sorted_matches() if sort_results else snapshot.matches
    if not matches:
        return
    console.print()
    console.print("Results:")
    for match in matches:
        console.print(f"File: {escape(match.path)}", highlight=False)
        console.print(f"  Matching lines: {format_lines(match.lines)}", highlight=False)


def error_message(error: SearchError) -> str:
    if error.code is SearchErrorCode.NOT_FOUND:
        return "Directory does not exist."
    return f"Filesystem error: {error.message}: {error.path}"


def render_error(console: Console, error: SearchError) -> None:
    console.print(escape(error_message(error)), style="red", highlight=False)
