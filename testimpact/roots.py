"""Changed-path normalisation and project-root discovery."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import ROOT_MARKERS
from .utils import ensure_utf8, is_source_file


def absolutize_changed(inputs: Iterable[str], cwd: Path) -> List[Path]:
    """Expand ``~``, anchor relative paths at *cwd* and canonicalise.

    Paths that no longer exist (deleted files) are still normalised, so
    ``..`` segments never reach the index lookups.
    """
    paths: List[Path] = []
    for raw in inputs:
        candidate = Path(os.path.expanduser(raw))
        if not candidate.is_absolute():
            candidate = cwd / candidate
        try:
            paths.append(candidate.resolve())
        except (OSError, RuntimeError):
            paths.append(Path(os.path.normpath(candidate)))
    return paths


def filter_source_files(paths: Iterable[Path]) -> List[Path]:
    return [p for p in paths if is_source_file(p)]


def common_ancestor_dirs(paths: Sequence[Path]) -> Optional[Path]:
    """Deepest directory shared by the parents of *paths*, if any."""
    if not paths:
        return None
    parents = [p.parent.parts for p in paths]
    first = parents[0]
    prefix_len = len(first)
    for parts in parents[1:]:
        prefix_len = min(prefix_len, len(parts))
        for i in range(prefix_len):
            if first[i] != parts[i]:
                prefix_len = i
                break
    if prefix_len == 0:
        return None
    return Path(*first[:prefix_len])


def _as_dir(path: Path) -> Path:
    return path if path.is_dir() else path.parent


def _nearest_marked_ancestor(path: Path) -> Optional[tuple]:
    depth = 0
    current = _as_dir(path)
    while True:
        if any((current / marker).exists() for marker in ROOT_MARKERS):
            return depth, current
        if current.parent == current:
            return None
        current = current.parent
        depth += 1


def choose_root(explicit: Optional[Path], changed: Sequence[Path], cwd: Path) -> Path:
    """Pick the directory to scan.

    An explicit root wins. Otherwise the closest ancestor of a changed file
    holding ``pyproject.toml`` or ``.git``, then the common ancestor of the
    changed files, then *cwd*.
    """
    if explicit is not None:
        path = _as_dir(explicit)
    else:
        candidates = [c for c in (_nearest_marked_ancestor(p) for p in changed) if c]
        if candidates:
            path = min(candidates, key=lambda c: c[0])[1]
        else:
            path = common_ancestor_dirs(changed) or cwd

    if path.parent == path:
        path = cwd
    ensure_utf8(path, "Project root")
    return path


def normalize_changed(paths: Iterable[Path]) -> List[Path]:
    out: List[Path] = []
    for path in paths:
        ensure_utf8(path, "Changed path")
        out.append(path)
    return out
