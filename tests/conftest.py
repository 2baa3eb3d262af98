"""Pytest configuration and fixtures for testimpact tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp()).resolve()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write *contents* to *relative* under the temp dir, creating parents."""

    def _write(relative: str, contents: str = "") -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents)
        return path

    return _write


@pytest.fixture
def layered_project(temp_dir: Path, write_file) -> Path:
    """``pkg.core`` <- ``pkg.service`` <- ``tests/test_service.py``."""
    write_file("pkg/__init__.py")
    write_file("pkg/core.py", "def core():\n    return 1\n")
    write_file(
        "pkg/service.py",
        "from pkg import core\n\ndef use():\n    return core.core()\n",
    )
    write_file(
        "tests/test_service.py",
        "from pkg import service\n\ndef test_use():\n    assert service.use() is not None\n",
    )
    return temp_dir
