"""Core data models shared by the indexer, resolver and impact engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .config import PACKAGE_MARKER
from .priority import Priority


class ImportKind(str, Enum):
    IMPORT = "import"
    IMPORT_FROM = "from"


@dataclass(frozen=True)
class ImportSpec:
    """Raw, unresolved components of one imported name.

    ``level`` is the number of leading dots (0 for absolute imports).
    ``name`` is only set for ``from`` imports and may be ``"*"``.
    """

    level: int
    module: Optional[str]
    name: Optional[str]
    kind: ImportKind


@dataclass(frozen=True)
class ModuleInfo:
    module: str
    path: Path
    imports: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_package(self) -> bool:
        return self.path.name == PACKAGE_MARKER


@dataclass
class TestResult:
    # Keep pytest from collecting this as a test class.
    __test__ = False

    path: str
    priority: Priority
    distance: int
