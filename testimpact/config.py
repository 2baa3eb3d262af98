"""Static settings for project scanning."""

from __future__ import annotations

import os
from typing import FrozenSet, Tuple

SOURCE_SUFFIX = ".py"
PACKAGE_MARKER = "__init__.py"
WILDCARD = "*"

# Files that mark a directory as a project root when none is given.
ROOT_MARKERS: Tuple[str, ...] = ("pyproject.toml", ".git")

# Per-directory ignore files honoured by the walker.
IGNORE_FILES: Tuple[str, ...] = (".gitignore", ".ignore")

_BASE_SKIP_DIRS = {
    ".git",
    "target",
    ".tox",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
}

_extra = os.environ.get("TESTIMPACT_EXTRA_SKIP_DIRS", "")
SKIP_DIRS: FrozenSet[str] = frozenset(
    _BASE_SKIP_DIRS | {name.strip() for name in _extra.split(",") if name.strip()}
)

PYPROJECT_FILE = "pyproject.toml"
TOOL_TABLE = "testimpact"
