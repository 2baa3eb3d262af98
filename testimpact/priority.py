"""Relevance ranking for impacted test files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable


@dataclass(frozen=True, order=True)
class Priority:
    """Sort key for a selected test; smaller is more relevant.

    ``filename_match`` is 0 when the test file is named after a changed
    module, 1 when the name merely mentions it, 2 otherwise.
    """

    filename_match: int
    distance: int


def priority(path: str, distance: int, changed_leaves: Iterable[str]) -> Priority:
    filename = PurePath(path).name

    filename_match = 2
    for leaf in changed_leaves:
        if filename.startswith(f"test_{leaf}") or f"_{leaf}" in filename:
            filename_match = 0
            break
        if leaf in filename:
            filename_match = min(filename_match, 1)

    return Priority(filename_match=filename_match, distance=distance)
