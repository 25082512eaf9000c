from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Protocol


class FileSystem(Protocol):
    def expanduser(self, path: str) -> str: ...

    def absolute(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def read_text(self, path: str) -> str: ...

    def walk(self, root: str) -> Iterator[tuple[str, bool]]:
        """Yield ``(path, is_regular_file)`` for every entry below *root*.

        Raises ``OSError`` only when *root* itself cannot be listed.
        """
        ...

    def iter_lines(self, path: str) -> Iterator[bytes]:
        """Yield the raw lines of *path* without their trailing newline."""
        ...


class OsFileSystem:
    def expanduser(self, path: str) -> str:
        return os.path.expanduser(path)

    def absolute(self, path: str) -> str:
        return os.path.abspath(path)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()

    def walk(self, root: str) -> Iterator[tuple[str, bool]]:
        # Explicit stack instead of os.walk: the root's listing error must
        # propagate while nested listing errors are skipped.
        stack = [root]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError:
                if current == root:
                    raise
                continue
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        stack.append(entry.path)
                        yield entry.path, False
                        continue
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError:
                    is_file = False
                yield entry.path, is_file

    def iter_lines(self, path: str) -> Iterator[bytes]:
        with open(path, "rb") as f:
            for line in f:
                yield line[:-1] if line.endswith(b"\n") else line


DEFAULT_FS = OsFileSystem()
