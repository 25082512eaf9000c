from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# (json_key, attr_name, minimum) for optional integer settings; shared by
# from_dict and CLI override clamping.
_INT_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("workers", "workers", 1),
    ("maxPending", "max_pending", 1),
)

_BOOL_FIELDS: tuple[tuple[str, str], ...] = (
    ("singlePass", "single_pass"),
    ("sortResults", "sort_results"),
    ("showProgress", "show_progress"),
)


def clamp_field(value: int | None, field_name: str) -> int | None:
    """Clamp *value* to the minimum defined for *field_name* in _INT_FIELDS."""
    if value is None:
        return None
    for _, attr, minimum in _INT_FIELDS:
        if attr == field_name:
            return max(minimum, value)
    return value


def _get_optional_int(data: dict[str, Any], json_key: str, default: int | None, minimum: int) -> int | None:
    raw = data.get(json_key, default)
    if raw is None:
        return None
    # bool is an int subclass; JSON true/false is not a worker count.
    if isinstance(raw, bool) or not isinstance(raw, int):
        msg = f"{json_key} must be an integer or null, got {raw!r}"
        raise ValueError(msg)
    return max(minimum, raw)


def _get_bool(data: dict[str, Any], json_key: str, default: bool) -> bool:
    """Only real JSON booleans count; anything else keeps *default*."""
    raw = data.get(json_key, default)
    return raw if isinstance(raw, bool) else default


@dataclass(slots=True)
class AppConfig:
    # None means one worker per available CPU.
    workers: int | None = None
    single_pass: bool = False
    sort_results: bool = False
    show_progress: bool = True
    # None means an unbounded task queue.
    max_pending: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "workers": self.workers,
            "singlePass": self.single_pass,
            "sortResults": self.sort_results,
            "showProgress": self.show_progress,
            "maxPending": self.max_pending,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], defaults: AppConfig) -> AppConfig:
        kwargs: dict[str, Any] = {}
        for json_key, attr, minimum in _INT_FIELDS:
            kwargs[attr] = _get_optional_int(data, json_key, getattr(defaults, attr), minimum)
        for json_key, attr in _BOOL_FIELDS:
            kwargs[attr] = _get_bool(data, json_key, getattr(defaults, attr))
        return cls(**kwargs)
