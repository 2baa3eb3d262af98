"""Project scanning: one ``ModuleInfo`` per parseable source file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from .config import PACKAGE_MARKER, SOURCE_SUFFIX
from .models import ModuleInfo
from .parser import parse_imports
from .resolve import module_name, resolve_import
from .utils import ensure_utf8, is_utf8
from .walker import iter_source_files

logger = logging.getLogger(__name__)


@dataclass
class ProjectIndex:
    """All indexed modules of a project, built fresh for every run."""

    root: Path
    modules: Dict[str, ModuleInfo] = field(default_factory=dict)
    path_to_module: Dict[Path, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(cls, root: Path, respect_gitignore: bool = True) -> "ProjectIndex":
        root = Path(root).resolve()
        ensure_utf8(root, "Project root")
        index = cls(root=root)

        def _on_error(exc: OSError) -> None:
            index.warnings.append(f"Skipping entry: {exc}")

        # Sorted so that identity collisions always keep the smallest path.
        candidates = sorted(
            iter_source_files(root, respect_gitignore=respect_gitignore, on_error=_on_error),
            key=str,
        )
        logger.debug("Scanning %d candidate files under %s", len(candidates), root)

        for path in candidates:
            info = index._parse_file(path)
            if info is None:
                continue
            index.path_to_module[info.path] = info.module
            existing = index.modules.get(info.module)
            if existing is not None:
                logger.debug(
                    "Module %s already provided by %s; ignoring %s",
                    info.module, existing.path, info.path,
                )
                continue
            index.modules[info.module] = info

        logger.info(
            "Indexed %d modules (%d warnings) under %s",
            len(index.modules), len(index.warnings), root,
        )
        return index

    def _parse_file(self, path: Path) -> Optional[ModuleInfo]:
        if not is_utf8(path):
            logger.debug("Skipping non UTF-8 path %r", path)
            return None

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.warnings.append(f"Failed to read {path}: {exc}")
            return None

        try:
            specs = parse_imports(source, filename=str(path))
        except (SyntaxError, ValueError, RecursionError, MemoryError) as exc:
            self.warnings.append(f"Failed to parse {path}: {exc}")
            return None

        module = module_name(self.root, path)
        is_package = path.name == PACKAGE_MARKER
        imports = []
        for spec in specs:
            target = resolve_import(module, is_package, spec)
            if target is not None:
                imports.append(target)

        return ModuleInfo(module=module, path=path, imports=tuple(imports))

    # ------------------------------------------------------------------
    # Matching dotted names against known modules
    # ------------------------------------------------------------------

    def top_level_packages(self) -> Set[str]:
        return {name.split(".")[0] for name in self.modules}

    def match_module(self, dotted: str) -> Optional[str]:
        """Map *dotted* to a known module identity, or ``None``.

        Tries an exact match, then the file a dotted path would live in,
        then successively shorter prefixes.
        """
        return (
            self.resolve_known_module(dotted)
            or self.heuristic_map(dotted)
            or self.trim_to_known_module(dotted)
        )

    def resolve_known_module(self, dotted: str) -> Optional[str]:
        return dotted if dotted in self.modules else None

    def heuristic_map(self, dotted: str) -> Optional[str]:
        if not dotted:
            return None
        candidate = self.root.joinpath(*dotted.split("."))
        for path in (
            candidate.with_name(candidate.name + SOURCE_SUFFIX),
            candidate / PACKAGE_MARKER,
        ):
            if path.exists() and path in self.path_to_module:
                return self.path_to_module[path]
        return None

    def trim_to_known_module(self, dotted: str) -> Optional[str]:
        parts = dotted.split(".")
        while len(parts) > 1:
            parts.pop()
            candidate = ".".join(parts)
            if candidate in self.modules:
                return candidate
        return None
