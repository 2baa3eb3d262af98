"""Tests for project indexing."""

from pathlib import Path

from testimpact.graph import impacted_tests
from testimpact.index import ProjectIndex


def test_build_indexes_modules_and_paths(temp_dir: Path, write_file):
    write_file("pkg/__init__.py")
    foo = write_file("pkg/foo.py", "import os\nfrom . import bar\n")
    write_file("pkg/bar.py")

    index = ProjectIndex.build(temp_dir)

    assert set(index.modules) == {"pkg", "pkg.foo", "pkg.bar"}
    assert index.path_to_module[foo] == "pkg.foo"
    assert index.modules["pkg.foo"].imports == ("os", "pkg.bar")
    assert index.warnings == []


def test_every_indexed_path_has_a_module(temp_dir: Path, write_file):
    write_file("pkg/__init__.py")
    write_file("pkg/a.py", "from pkg import b\n")
    write_file("tests/test_a.py", "import pkg.a\n")

    index = ProjectIndex.build(temp_dir)

    for module in index.path_to_module.values():
        assert module in index.modules


def test_package_marker_relative_import(temp_dir: Path, write_file):
    write_file("pkg/__init__.py", "from .core import thing\n")
    write_file("pkg/core.py")

    index = ProjectIndex.build(temp_dir)

    assert index.modules["pkg"].imports == ("pkg.core.thing",)
    assert index.modules["pkg"].is_package


def test_unparsable_file_is_skipped_with_warning(temp_dir: Path, write_file):
    write_file("good.py", "x = 1\n")
    write_file("broken.py", "def broken( this is not valid python")

    index = ProjectIndex.build(temp_dir)

    assert "good" in index.modules
    assert "broken" not in index.modules
    assert len(index.warnings) == 1
    assert index.warnings[0].startswith("Failed to parse")
    assert "broken.py" in index.warnings[0]


def test_undecodable_file_is_skipped_with_warning(temp_dir: Path):
    (temp_dir / "latin.py").write_bytes(b"name = '\xff\xfe'\n")

    index = ProjectIndex.build(temp_dir)

    assert "latin" not in index.modules
    assert len(index.warnings) == 1
    assert index.warnings[0].startswith("Failed to read")


def test_deeply_nested_generated_file_does_not_stop_the_scan(temp_dir: Path, write_file):
    write_file("pkg/__init__.py")
    write_file("pkg/generated.py", "TOTAL = " + " + ".join(["1"] * 5000) + "\n")
    write_file("pkg/core.py", "def core():\n    return 1\n")
    write_file("tests/test_core.py", "from pkg import core\n")

    index = ProjectIndex.build(temp_dir)
    results = impacted_tests(index, [temp_dir / "pkg" / "core.py"], quiet=True)

    assert [r.path for r in results] == ["tests/test_core.py"]
    # Interpreters that cannot build the tree report it; the others index it.
    assert all(w.startswith("Failed to parse") for w in index.warnings)
    assert len(index.warnings) + ("pkg.generated" in index.modules) == 1


def test_recursion_error_while_parsing_becomes_warning(temp_dir: Path, write_file, monkeypatch):
    import testimpact.index as index_module

    write_file("deep.py", "x = 1\n")
    write_file("fine.py", "import deep\n")
    real_parse = index_module.parse_imports

    def _parse(source, filename="<unknown>"):
        if filename.endswith("deep.py"):
            raise RecursionError("maximum recursion depth exceeded during ast construction")
        return real_parse(source, filename=filename)

    monkeypatch.setattr(index_module, "parse_imports", _parse)

    index = ProjectIndex.build(temp_dir)

    assert set(index.modules) == {"fine"}
    assert len(index.warnings) == 1
    assert index.warnings[0].startswith("Failed to parse")
    assert "deep.py" in index.warnings[0]


def test_deny_listed_directories_are_skipped(temp_dir: Path, write_file):
    write_file(".venv/lib/site.py", "import thing\n")
    write_file("node_modules/pkg/x.py")
    write_file("__pycache__/cached.py")
    write_file("main.py")

    index = ProjectIndex.build(temp_dir)

    assert set(index.modules) == {"main"}


def test_gitignored_files_are_skipped(temp_dir: Path, write_file):
    write_file(".gitignore", "generated/\n")
    write_file("generated/out.py")
    write_file("main.py")

    assert set(ProjectIndex.build(temp_dir).modules) == {"main"}
    assert "generated.out" in ProjectIndex.build(temp_dir, respect_gitignore=False).modules


def test_identity_collision_keeps_smallest_path(temp_dir: Path, write_file):
    write_file("a/pkg/__init__.py")
    first = write_file("a/pkg/mod.py")
    write_file("b/pkg/__init__.py")
    second = write_file("b/pkg/mod.py")

    index = ProjectIndex.build(temp_dir)

    assert index.modules["pkg.mod"].path == first
    assert index.path_to_module[second] == "pkg.mod"


def test_root_is_resolved(temp_dir: Path, write_file, monkeypatch):
    write_file("main.py")
    monkeypatch.chdir(temp_dir)

    index = ProjectIndex.build(Path("."))

    assert index.root == temp_dir
    assert temp_dir / "main.py" in index.path_to_module


class TestMatchModule:
    """Tests for matching dotted names to known modules."""

    def _index(self, temp_dir: Path, write_file) -> ProjectIndex:
        write_file("pkg/__init__.py")
        write_file("pkg/foo.py")
        write_file("src/app/__init__.py")
        write_file("src/app/views.py")
        return ProjectIndex.build(temp_dir)

    def test_exact_match(self, temp_dir: Path, write_file):
        index = self._index(temp_dir, write_file)

        assert index.match_module("pkg.foo") == "pkg.foo"

    def test_path_heuristic(self, temp_dir: Path, write_file):
        index = self._index(temp_dir, write_file)

        # src/ is not a package, so the file is known as app.views.
        assert index.heuristic_map("src.app.views") == "app.views"
        assert index.heuristic_map("src.app") == "app"
        assert index.match_module("src.app.views") == "app.views"

    def test_truncates_to_known_parent(self, temp_dir: Path, write_file):
        index = self._index(temp_dir, write_file)

        assert index.match_module("pkg.foo.some_function") == "pkg.foo"
        assert index.match_module("pkg.missing") == "pkg"

    def test_unknown_is_none(self, temp_dir: Path, write_file):
        index = self._index(temp_dir, write_file)

        assert index.match_module("requests.adapters") is None

    def test_top_level_packages(self, temp_dir: Path, write_file):
        index = self._index(temp_dir, write_file)

        assert index.top_level_packages() == {"pkg", "app"}
