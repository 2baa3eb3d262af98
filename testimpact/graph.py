"""Reverse import graph and impacted-test selection."""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .diagnostics import Diagnostics
from .errors import WarningsAsErrors
from .index import ProjectIndex
from .models import TestResult
from .priority import priority
from .resolve import module_name
from .utils import ensure_utf8, is_source_file, is_test_file

logger = logging.getLogger(__name__)

ReverseGraph = Dict[str, Set[str]]


def build_reverse_graph(index: ProjectIndex, diagnostics: Diagnostics) -> ReverseGraph:
    """Map each imported module to the set of modules importing it.

    Imports that match nothing are dropped; those whose first component is
    one of the project's own top-level packages are reported as unresolved.
    """
    top_levels = index.top_level_packages()
    reverse: ReverseGraph = {}

    for info in index.modules.values():
        for imported in info.imports:
            target = index.match_module(imported)
            if target is None:
                if imported.split(".")[0] in top_levels:
                    diagnostics.warn(
                        f"Unresolved import `{imported}` in module `{info.module}`"
                    )
                continue
            reverse.setdefault(target, set()).add(info.module)

    logger.debug("Reverse graph has %d imported modules", len(reverse))
    return reverse


def select_seeds(
    index: ProjectIndex,
    changed: Iterable[Path],
    diagnostics: Diagnostics,
) -> List[str]:
    """Return the distinct modules touched by *changed*, in input order.

    Files that were not indexed (deleted, or failed to parse) get a module
    name guessed from their path; if that matches nothing the guess itself
    is seeded and simply has no importers.
    """
    seeds: List[str] = []
    seen: Set[str] = set()

    for raw in changed:
        path = Path(raw)
        ensure_utf8(path, "Changed path")

        module = index.path_to_module.get(path)
        if module is None:
            if not is_source_file(path):
                continue
            guessed = module_name(index.root, path)
            module = index.match_module(guessed) or guessed
            diagnostics.note(
                f"Warning: changed file not indexed (using module `{guessed}`): {path}"
            )

        if module not in seen:
            seen.add(module)
            seeds.append(module)

    return seeds


def bounded_bfs(
    reverse: ReverseGraph,
    seeds: Iterable[str],
    distance_limit: Optional[int] = None,
) -> Dict[str, int]:
    """Breadth-first walk over importers, returning the first distance of each module.

    A module at ``distance_limit`` is still returned but its importers are
    not expanded from it.
    """
    distances: Dict[str, int] = {}
    queue: deque = deque()
    for seed in seeds:
        if seed not in distances:
            distances[seed] = 0
            queue.append(seed)

    while queue:
        module = queue.popleft()
        current = distances[module]
        if distance_limit is not None and current >= distance_limit:
            continue
        # Sorted so discovery order does not depend on set iteration.
        for importer in sorted(reverse.get(module, ())):
            if importer not in distances:
                distances[importer] = current + 1
                queue.append(importer)

    return distances


def _display_path(index: ProjectIndex, path: Path) -> str:
    try:
        return path.relative_to(index.root).as_posix()
    except ValueError:
        return str(path)


def rank_tests(index: ProjectIndex, distances: Dict[str, int]) -> List[TestResult]:
    changed_leaves = {module.split(".")[-1] for module in distances}

    tests: List[TestResult] = []
    for module, distance in distances.items():
        info = index.modules.get(module)
        if info is None or not is_test_file(info.path):
            continue
        display = _display_path(index, info.path)
        tests.append(TestResult(
            path=display,
            priority=priority(display, distance, changed_leaves),
            distance=distance,
        ))

    tests.sort(key=lambda t: (t.priority, t.path))
    return tests


def impacted_tests(
    index: ProjectIndex,
    changed: Iterable[Path],
    max_results: Optional[int] = None,
    distance_limit: Optional[int] = None,
    quiet: bool = False,
    warn_as_error: bool = False,
    diagnostics: Optional[Diagnostics] = None,
) -> List[TestResult]:
    """Select and rank the test files impacted by *changed*.

    Warnings from indexing and from import resolution are collected in
    *diagnostics* (a fresh collector seeded with the index warnings when
    omitted) and printed unless *quiet*. With *warn_as_error* a non-empty
    warning list raises ``WarningsAsErrors`` once the full result is known.
    """
    if diagnostics is None:
        diagnostics = Diagnostics(index.warnings, quiet=quiet)

    reverse = build_reverse_graph(index, diagnostics)
    diagnostics.emit()

    seeds = select_seeds(index, changed, diagnostics)
    logger.debug("Seeds: %s", seeds)

    distances = bounded_bfs(reverse, seeds, distance_limit)
    logger.info("Reached %d modules from %d seeds", len(distances), len(seeds))

    tests = rank_tests(index, distances)
    if max_results is not None:
        tests = tests[:max_results]

    if warn_as_error and diagnostics.warnings:
        raise WarningsAsErrors(len(diagnostics.warnings), diagnostics.warnings[0])
    return tests
