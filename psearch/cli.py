from __future__ import annotations

import logging

import typer
from result import Err
from rich.console import Console
from rich.markup import escape

from psearch.config.defaults import default_config
from psearch.config.loader import load_config, sample_config_json
from psearch.config.schema import AppConfig, clamp_field
from psearch.log import configure_logging
from psearch.models.search import SearchError, SearchResult
from psearch.pool import WorkerPool
from psearch.search import ParallelScanner, resolve_root
from psearch.services.fs import DEFAULT_FS
from psearch.ui.progress import SearchProgress
from psearch.ui.report import render_error, render_header, render_report

logger = logging.getLogger(__name__)

USAGE = "Usage: psearch <directory_path> <search_term>"

app = typer.Typer(add_completion=False, help="Search a directory tree for a literal term in parallel.")


def _resolve_config(
    err: Console,
    config_path: str | None,
    workers: int | None,
    single_pass: bool,
    sort: bool,
    no_progress: bool,
) -> AppConfig:
    loaded = load_config(config_path)
    if isinstance(loaded, Err):
        err.print(f"[yellow]Warning:[/yellow] {escape(loaded.unwrap_err())} Using defaults.")
        config = default_config()
    else:
        config = loaded.unwrap()

    if workers is not None:
        config.workers = clamp_field(workers, "workers")
    config.single_pass = config.single_pass or single_pass
    config.sort_results = config.sort_results or sort
    config.show_progress = config.show_progress and not no_progress
    return config


def _run_search(out: Console, config: AppConfig, directory: str, term: str) -> SearchResult:
    with WorkerPool(config.workers, max_pending=config.max_pending) as pool:
        scanner = ParallelScanner(pool, single_pass=config.single_pass)
        with SearchProgress(out, enabled=config.show_progress) as progress:
            return scanner.search(directory, term, progress_callback=progress.update)


@app.command(context_settings={"ignore_unknown_options": True})
def search(
    directory: str | None = typer.Argument(None, help="Root directory to search.", show_default=False),
    term: str | None = typer.Argument(None, help="Literal, case-sensitive search term.", show_default=False),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Worker threads (default: one per CPU).", show_default=False
    ),
    config_path: str | None = typer.Option(None, "--config", help="Path to a JSON config file.", show_default=False),
    single_pass: bool = typer.Option(False, "--single-pass", help="Dispatch while walking, without a counting pass."),
    sort: bool = typer.Option(False, "--sort", help="List results by path instead of completion order."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide the live progress line."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    sample_config: bool = typer.Option(False, "--sample-config", help="Print a sample config and exit."),
) -> None:
    out = Console(soft_wrap=True)
    err = Console(stderr=True, soft_wrap=True)
    configure_logging(verbose, console=err)

    if sample_config:
        out.print(sample_config_json(), markup=False, highlight=False)
        return

    if directory is None or term is None:
        out.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(code=1)

    # Root errors are reported before any header or progress output.
    root = resolve_root(directory, DEFAULT_FS)
    if isinstance(root, SearchError):
        render_error(err, root)
        raise typer.Exit(code=1)

    config = _resolve_config(err, config_path, workers, single_pass, sort, no_progress)
    render_header(out, term, directory)

    try:
        result = _run_search(out, config, directory, term)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Search aborted", exc_info=True)
        err.print(f"Error: {escape(str(exc))}", style="red", highlight=False)
        raise typer.Exit(code=1) from exc

    if isinstance(result, Err):
        render_error(err, result.unwrap_err())
        raise typer.Exit(code=1)

    render_report(out, result.unwrap(), sort_results=config.sort_results)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
