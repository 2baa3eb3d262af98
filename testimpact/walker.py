"""Candidate source-file enumeration honouring ignore files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from pathspec import GitIgnoreSpec

from .config import IGNORE_FILES
from .utils import filter_dir, is_source_file

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[OSError], None]


def _load_spec(files: List[Path]) -> Optional[GitIgnoreSpec]:
    lines: List[str] = []
    for file in files:
        try:
            lines.extend(file.read_text(encoding="utf-8", errors="replace").splitlines())
        except OSError as exc:
            logger.debug("Cannot read ignore file %s: %s", file, exc)
    if not lines:
        return None
    return GitIgnoreSpec.from_lines(lines)


class IgnoreRules:
    """Ignore patterns keyed by the directory whose ignore file declared them."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._specs: Dict[Path, GitIgnoreSpec] = {}
        exclude = _load_spec([root / ".git" / "info" / "exclude"])
        if exclude is not None:
            self._specs[root] = exclude

    def load_dir(self, directory: Path) -> None:
        spec = _load_spec([directory / name for name in IGNORE_FILES if (directory / name).is_file()])
        if spec is None:
            return
        existing = self._specs.get(directory)
        if existing is not None:
            spec = existing + spec
        self._specs[directory] = spec

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        """Return the verdict of the deepest ignore file with a matching rule."""
        bases = sorted(self._specs, key=lambda base: len(base.parts), reverse=True)
        for base in bases:
            try:
                rel = path.relative_to(base).as_posix()
            except ValueError:
                continue
            if is_dir:
                rel += "/"
            result = self._specs[base].check_file(rel)
            if result.include is not None:
                return result.include
        return False


def iter_source_files(
    root: Path,
    respect_gitignore: bool = True,
    on_error: Optional[ErrorHandler] = None,
) -> Iterator[Path]:
    """Yield source files under *root* in sorted order.

    Deny-listed directories are never entered. Hidden files are included.
    Directory read errors are passed to *on_error*, if given, and skipped.
    """
    rules = IgnoreRules(root) if respect_gitignore else None

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        current = Path(dirpath)
        if rules is not None:
            rules.load_dir(current)

        kept = []
        for name in sorted(dirnames):
            if not filter_dir(name):
                continue
            if rules is not None and rules.is_ignored(current / name, is_dir=True):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            if not is_source_file(name):
                continue
            file_path = current / name
            if rules is not None and rules.is_ignored(file_path):
                continue
            yield file_path
