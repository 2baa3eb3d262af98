"""Small path predicates shared across the scanner and the CLI."""

from __future__ import annotations

from pathlib import PurePath
from typing import Union

from .config import SKIP_DIRS, SOURCE_SUFFIX
from .errors import PathEncodingError

PathLike = Union[str, PurePath]


def filter_dir(path: PathLike) -> bool:
    """Return False for directories the scan should never descend into."""
    return PurePath(path).name not in SKIP_DIRS


def is_source_file(path: PathLike) -> bool:
    return PurePath(path).suffix == SOURCE_SUFFIX


def is_test_file(path: PathLike) -> bool:
    filename = PurePath(path).name
    return filename.startswith("test_") or filename.endswith("_test.py")


def is_utf8(path: PathLike) -> bool:
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def ensure_utf8(path: PathLike, what: str = "Path") -> None:
    if not is_utf8(path):
        raise PathEncodingError(
            f"{what} must be valid UTF-8: {str(path).encode('utf-8', 'surrogateescape')!r}"
        )
