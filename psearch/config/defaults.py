from __future__ import annotations

from psearch.config.schema import AppConfig


def default_config() -> AppConfig:
    return AppConfig()
