"""Project-level configuration read from ``pyproject.toml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .config import PYPROJECT_FILE, TOOL_TABLE
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class SelectionConfig:
    """Knobs for one selection run.

    Values come from built-in defaults, then ``[tool.testimpact]`` in the
    project's ``pyproject.toml``, then command-line flags.
    """

    max: Optional[int] = None
    distance_limit: Optional[int] = None
    quiet: bool = False
    warn_as_error: bool = False
    respect_gitignore: bool = True

    def validate(self) -> "SelectionConfig":
        if self.max is not None and (not _is_int(self.max) or self.max < 1):
            raise ConfigError(f"max must be a positive integer, got {self.max!r}")
        if self.distance_limit is not None and (
            not _is_int(self.distance_limit) or self.distance_limit < 0
        ):
            raise ConfigError(
                f"distance-limit must be a non-negative integer, got {self.distance_limit!r}"
            )
        for name in ("quiet", "warn_as_error", "respect_gitignore"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name.replace('_', '-')} must be a boolean")
        return self


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_project_config(root: Path) -> Dict[str, Any]:
    """Return the ``[tool.testimpact]`` table of *root*'s pyproject, or ``{}``."""
    pyproject = root / PYPROJECT_FILE
    if not pyproject.is_file():
        return {}
    try:
        with open(pyproject, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", pyproject, exc)
        return {}
    table = data.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{TOOL_TABLE}] in {pyproject} must be a table")
    return table


def build_selection_config(root: Path, **overrides: Any) -> SelectionConfig:
    """Merge file settings with *overrides*; ``None`` overrides are ignored."""
    known = {f.name for f in fields(SelectionConfig)}
    values: Dict[str, Any] = {}

    for key, value in load_project_config(root).items():
        name = key.replace("-", "_")
        if name not in known:
            logger.warning("Unknown key '%s' in [tool.%s]", key, TOOL_TABLE)
            continue
        values[name] = value

    for name, value in overrides.items():
        if name not in known:
            raise ConfigError(f"Unknown setting: {name}")
        if value is not None:
            values[name] = value

    return SelectionConfig(**values).validate()
