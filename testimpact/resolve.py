"""Module identities and import-to-target resolution."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .config import PACKAGE_MARKER, SOURCE_SUFFIX, WILDCARD
from .models import ImportKind, ImportSpec

_MARKER_STEM = Path(PACKAGE_MARKER).stem


def module_name(root: Path, path: Path) -> str:
    """Derive the dotted module identity of *path*.

    Ancestor directories holding a package marker form the prefix; the file
    stem is appended unless the file is the marker itself. Without any
    package ancestry the path relative to *root* is dotted instead. The file
    need not exist.
    """
    package_parts: List[str] = []
    current = path.parent
    while (current / PACKAGE_MARKER).exists():
        package_parts.append(current.name)
        if current.parent == current:
            break
        current = current.parent
    package_parts.reverse()

    stem = path.stem
    if package_parts:
        if stem == _MARKER_STEM:
            return ".".join(package_parts)
        return ".".join(package_parts + [stem])

    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    components = [part for part in rel.parts if part != rel.anchor]
    if components and components[-1].endswith(SOURCE_SUFFIX):
        components[-1] = components[-1][: -len(SOURCE_SUFFIX)]
    if len(components) > 1 and components[-1] == _MARKER_STEM:
        components.pop()
    return ".".join(components)


def resolve_import(
    current_module: str,
    is_package: bool,
    spec: ImportSpec,
) -> Optional[str]:
    """Turn *spec*, seen in *current_module*, into a fully dotted target.

    Relative imports drop one trailing component per leading dot, except
    that ``from . import x`` inside a package's marker file stays in that
    package. ``from a import b`` targets ``a.b`` (the name may be a
    submodule); wildcard imports target ``a`` itself.
    """
    parts: List[str] = []
    if spec.level > 0:
        parts = current_module.split(".") if current_module else []
        if not (is_package and spec.level == 1):
            pops = min(spec.level, len(parts))
            if pops:
                del parts[-pops:]

    if spec.module:
        parts.extend(spec.module.split("."))

    if spec.kind is ImportKind.IMPORT_FROM and spec.name and spec.name != WILDCARD:
        parts.append(spec.name)

    if not parts:
        return None
    return ".".join(parts)
