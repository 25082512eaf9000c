from __future__ import annotations

from collections.abc import Iterable


def encode_term(term: str) -> bytes:
    """Encode a search term the way file names and contents arrive from the OS."""
    return term.encode("utf-8", "surrogateescape")


def match_lines(lines: Iterable[bytes], term: bytes) -> list[int]:
    """Return the 1-based numbers of every line containing *term* as a literal substring.

    Case-sensitive, no regex.  An empty *term* matches every line.
    """
    return [number for number, line in enumerate(lines, start=1) if term in line]
