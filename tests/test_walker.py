"""Tests for candidate-file enumeration."""

import os
from pathlib import Path

import pytest

from testimpact.utils import filter_dir, is_source_file, is_test_file
from testimpact.walker import iter_source_files


def _rel(root: Path, paths):
    return [p.relative_to(root).as_posix() for p in paths]


def test_yields_sorted_python_files(temp_dir: Path, write_file):
    write_file("b.py")
    write_file("a.py")
    write_file("notes.txt")
    write_file("pkg/z.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == ["a.py", "b.py", "pkg/z.py"]


def test_hidden_files_are_included(temp_dir: Path, write_file):
    write_file(".hidden/tool.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == [".hidden/tool.py"]


def test_nested_gitignore_applies_to_its_subtree(temp_dir: Path, write_file):
    write_file("sub/.gitignore", "gen_*.py\n")
    write_file("sub/gen_a.py")
    write_file("sub/keep.py")
    write_file("gen_top.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == ["gen_top.py", "sub/keep.py"]


def test_deeper_negation_reincludes_file(temp_dir: Path, write_file):
    write_file(".gitignore", "gen_*.py\n")
    write_file("sub/.gitignore", "!gen_keep.py\n")
    write_file("gen_top.py")
    write_file("sub/gen_keep.py")
    write_file("sub/gen_drop.py")
    write_file("sub/main.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == ["sub/gen_keep.py", "sub/main.py"]


def test_gitignore_overrides_git_exclude(temp_dir: Path, write_file):
    write_file(".git/info/exclude", "*.py\n")
    write_file(".gitignore", "!main.py\n")
    write_file("main.py")
    write_file("other.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == ["main.py"]


def test_dot_ignore_file_and_git_exclude(temp_dir: Path, write_file):
    write_file(".ignore", "scratch.py\n")
    write_file(".git/info/exclude", "local/\n")
    write_file("scratch.py")
    write_file("local/x.py")
    write_file("main.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == ["main.py"]


def test_ignore_rules_can_be_disabled(temp_dir: Path, write_file):
    write_file(".gitignore", "*.py\n")
    write_file("main.py")

    assert _rel(temp_dir, iter_source_files(temp_dir)) == []
    assert _rel(temp_dir, iter_source_files(temp_dir, respect_gitignore=False)) == ["main.py"]


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_directory_reports_error(temp_dir: Path, write_file):
    write_file("locked/x.py")
    locked = temp_dir / "locked"
    locked.chmod(0)
    errors = []
    try:
        list(iter_source_files(temp_dir, on_error=errors.append))
    finally:
        locked.chmod(0o755)

    assert len(errors) == 1


@pytest.mark.parametrize("name, expected", [
    (".git", False),
    ("venv", False),
    (".venv", False),
    ("node_modules", False),
    ("__pycache__", False),
    ("target", False),
    (".tox", False),
    ("src", True),
])
def test_filter_dir(name, expected):
    assert filter_dir(Path("/repo") / name) is expected


def test_is_source_file():
    assert is_source_file("pkg/mod.py")
    assert not is_source_file("pkg/mod.pyc")
    assert not is_source_file("scripts/test")


def test_conftest_is_not_considered_a_test(temp_dir: Path, write_file):
    conftest = write_file("tests/conftest.py", "# helper fixtures\n")
    real_test = write_file("tests/test_real.py", "def test_ok():\n    assert True\n")

    assert not is_test_file(conftest)
    assert is_test_file(real_test)
    assert is_test_file("pkg/engine_test.py")
    assert not is_test_file("pkg/testing.py")
