"""Changed-file discovery through the ``git`` command line."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import GitError

logger = logging.getLogger(__name__)


def run_git(cwd: Path, args: Sequence[str]) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise GitError(f"Failed to run git {list(args)}: {exc}") from exc

    if result.returncode != 0:
        raise GitError(
            f"git {list(args)} failed with status {result.returncode}: {result.stderr.strip()}"
        )
    return result.stdout


def run_git_name_only(cwd: Path, args: Sequence[str]) -> List[Path]:
    return [Path(line) for line in run_git(cwd, args).splitlines() if line.strip()]


def gather_git_changed(
    cwd: Path,
    staged: bool = False,
    worktree: bool = False,
    diff_ref: Optional[str] = None,
    merge_base: Optional[str] = None,
) -> List[Path]:
    """Collect changed paths from git, sorted and unique.

    git reports paths relative to the repository top level, so they are
    anchored there rather than at *cwd*.

    ``merge_base`` diffs from the merge base of that ref and ``HEAD``; it
    also serves as the ref when ``diff_ref`` is not given.
    """
    paths: List[Path] = []

    if staged:
        paths.extend(run_git_name_only(cwd, ["diff", "--name-only", "--cached"]))

    if worktree:
        paths.extend(run_git_name_only(cwd, ["diff", "--name-only", "HEAD"]))

    base = diff_ref or merge_base
    if base:
        if merge_base:
            base = run_git(cwd, ["merge-base", base, "HEAD"]).strip()
        paths.extend(run_git_name_only(cwd, ["diff", "--name-only", f"{base}..HEAD"]))

    if not paths:
        return []
    toplevel = Path(run_git(cwd, ["rev-parse", "--show-toplevel"]).strip())
    unique = sorted({p if p.is_absolute() else toplevel / p for p in paths})
    logger.debug("git reported %d changed paths", len(unique))
    return unique
