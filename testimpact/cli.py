"""Typer-based CLI: suggest impacted tests, or format JUnit reports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config_manager import build_selection_config
from .diagnostics import Diagnostics
from .errors import TestImpactError
from .git import gather_git_changed
from .graph import impacted_tests
from .index import ProjectIndex
from .junit import format_junit
from .models import TestResult
from .roots import absolutize_changed, choose_root, filter_source_files, normalize_changed

err_console = Console(stderr=True, highlight=False, soft_wrap=True)

app = typer.Typer(
    help="Suggest impacted Python tests for changed files.",
    rich_markup_mode="rich",
    add_completion=False,
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"testimpact v{__version__}")
        raise typer.Exit()


def _split_changed(values: Optional[Sequence[str]]) -> List[str]:
    out: List[str] = []
    for value in values or []:
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return out


def _print_dry_run(root: Path, changed: Sequence[Path], impacted: Sequence[TestResult]) -> None:
    err_console.print(f"Root: {root}", markup=False)
    err_console.print(f"Changed files ({len(changed)}):")
    for path in changed:
        err_console.print(f"  - {path}", markup=False)

    table = Table(title=f"Selected tests ({len(impacted)})")
    table.add_column("Test", style="cyan")
    table.add_column("Distance", justify="right")
    table.add_column("Filename match", justify="right")
    for res in impacted:
        table.add_row(res.path, str(res.distance), str(res.priority.filename_match))
    err_console.print(table)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    changed: Optional[List[str]] = typer.Option(
        None, "--changed", help="Changed files, comma-separated or repeated (relative to CWD or absolute).",
    ),
    git_diff: Optional[str] = typer.Option(
        None, "--git-diff", help="Diff against this Git ref (e.g. origin/main) to find changed files.",
    ),
    git_staged: bool = typer.Option(False, "--git-staged", help="Use staged changes (git diff --cached)."),
    git_merge_base: Optional[str] = typer.Option(
        None, "--git-merge-base", help="Diff from the merge-base with this ref.",
    ),
    git_worktree: bool = typer.Option(
        False, "--git-worktree", help="Use working tree (staged + unstaged) changes against HEAD.",
    ),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root to scan."),
    max_results: Optional[int] = typer.Option(
        None, "--max", min=1, help="Maximum number of test files to output (most relevant first).",
    ),
    distance_limit: Optional[int] = typer.Option(
        None, "--distance-limit", min=0,
        help="Limit import-graph distance from changed modules (0 = only the changed modules).",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print a selection summary instead of the plain list."),
    warn_as_error: bool = typer.Option(False, "--warn-as-error", help="Treat any warning as an error."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress warnings on stderr."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Print the test files impacted by the changed files, most relevant first."""
    if ctx.invoked_subcommand is not None:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cwd = Path.cwd()
    try:
        changed_abs = absolutize_changed(_split_changed(changed), cwd)
        use_git = git_staged or git_worktree or git_diff is not None or git_merge_base is not None
        if not changed_abs or use_git:
            changed_abs.extend(gather_git_changed(
                cwd,
                staged=git_staged,
                worktree=git_worktree,
                diff_ref=git_diff,
                merge_base=git_merge_base,
            ))

        # Only Python sources can select tests.
        changed_abs = filter_source_files(changed_abs)
        if not changed_abs:
            if not quiet:
                typer.echo("Info: no changed Python files detected; skipping.", err=True)
            raise typer.Exit(code=0)

        project_root = choose_root(root, changed_abs, cwd)
        changed_paths = normalize_changed(changed_abs)
        settings = build_selection_config(
            project_root,
            max=max_results,
            distance_limit=distance_limit,
            quiet=True if quiet else None,
            warn_as_error=True if warn_as_error else None,
        )

        index = ProjectIndex.build(project_root, respect_gitignore=settings.respect_gitignore)
        diagnostics = Diagnostics(index.warnings, quiet=settings.quiet, console=err_console)
        impacted = impacted_tests(
            index,
            changed_paths,
            max_results=settings.max,
            distance_limit=settings.distance_limit,
            warn_as_error=settings.warn_as_error,
            diagnostics=diagnostics,
        )
    except TestImpactError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if dry_run:
        _print_dry_run(index.root, changed_paths, impacted)
        return

    for res in impacted:
        typer.echo(res.path)


@app.command("format")
def format_report(
    path: Path = typer.Argument(..., help="pytest JUnit XML report (pytest --junitxml=report.xml)."),
    include_skipped: bool = typer.Option(
        False, "--include-skipped", help="Emit warnings for skipped tests (ignored by default).",
    ),
):
    """Format a pytest JUnit XML report as GitHub Actions annotations."""
    try:
        reported = format_junit(path, include_skipped=include_skipped, echo=typer.echo)
    except TestImpactError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if reported == 0:
        typer.echo(f"No failures, errors, or skipped tests found in {path}", err=True)


if __name__ == "__main__":
    app()
