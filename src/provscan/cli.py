"""Command line interface for provscan."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from rich.console import Console

from provscan.config import AppConfig
from provscan.errors import DatabaseError, PrivilegeRequiredError
from provscan.index.store import ProvenanceStore
from provscan.models import ScanResult
from provscan.output import render_text, result_document, results_document
from provscan.scan.scanner import Scanner
from provscan.tags.reader import TagAbsent


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="provscan - show which application created or modified a file")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_privileged() -> None:
    if os.geteuid() != 0:
        raise PrivilegeRequiredError()


def _echo(target: Console, text: str, **kwargs) -> None:
    # File paths are printed verbatim, without markup or emoji substitution.
    target.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True, **kwargs)


def _print_result(result: ScanResult) -> None:
    _echo(console, render_text(result))


@app.command()
def scan(
    path: Path = typer.Argument(..., help="File or directory to inspect."),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output in JSON format"),
    db: Path = typer.Option(None, "--db", help="Provenance tracking database path"),
    workers: int = typer.Option(AppConfig().workers, min=1, help="Parallel attribute readers"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show provenance information for a file or every entry of a directory."""
    _setup_logging(verbose)
    try:
        _ensure_privileged()
    except PrivilegeRequiredError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if not path.exists() and not path.is_symlink():
        raise typer.BadParameter(f"Path not found: {path}")

    config = AppConfig(db_path=db if db is not None else AppConfig().db_path, workers=workers)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not json_output:
        _echo(console, f"Loading {resolved_db}")
    try:
        store = ProvenanceStore.load(resolved_db)
    except DatabaseError as exc:
        _echo(err_console, str(exc), style="red")
        raise typer.Exit(code=1) from exc

    scanner = Scanner(store, attribute=config.attribute, workers=config.workers)
    target = path.absolute()

    if target.is_dir() and not target.is_symlink():
        _scan_directory(scanner, target, json_output)
    else:
        _scan_file(scanner, target, json_output)


def _scan_directory(scanner: Scanner, root: Path, json_output: bool) -> None:
    if json_output:
        typer.echo(results_document(scanner.scan_tree(root)))
        return

    console.print("Scanning directory")
    for result in scanner.scan_tree(root):
        _print_result(result)
    stats = scanner.stats
    console.print(
        f"Resolved: {stats.resolved}, unknown: {stats.unknown}, "
        f"malformed: {stats.malformed}, failed: {stats.failed}"
    )


def _scan_file(scanner: Scanner, path: Path, json_output: bool) -> None:
    if not json_output:
        console.print("Scanning file")

    outcome = scanner.scan_one(path)
    if isinstance(outcome, TagAbsent):
        _echo(err_console, f"No provenance information for {path}")
        return
    if not isinstance(outcome, ScanResult):
        _echo(err_console, f"Error scanning {path}: {outcome}", style="red")
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(result_document(outcome))
    else:
        _print_result(outcome)
