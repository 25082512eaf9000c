from __future__ import annotations

import threading


class AtomicCounter:
    """Integer shared across threads.  Every read-modify-write happens under its own lock."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = value

    def increment(self, delta: int = 1) -> int:
        with self._lock:
            self._value += delta
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value

    def raise_to(self, value: int) -> int:
        """Set the counter to *value* if that is larger.  Returns the resulting value."""
        with self._lock:
            if value > self._value:
                self._value = value
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.value})"
