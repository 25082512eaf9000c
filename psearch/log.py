from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route the package's log records to stderr through rich."""
    handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger = logging.getLogger("psearch")
    for existing in list(pkg_logger.handlers):
        pkg_logger.removeHandler(existing)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
