"""Import extraction built on Python's ``ast`` module."""

from __future__ import annotations

import ast
from typing import List

from .models import ImportKind, ImportSpec

# Imports are statements, so only nodes that carry statement bodies are walked.
_BODY_NODES = tuple(
    getattr(ast, name) for name in ("stmt", "excepthandler", "match_case") if hasattr(ast, name)
)


class ImportCollector(ast.NodeVisitor):
    """Collects every ``import`` / ``from ... import`` statement, at any depth.

    Imports nested in functions, classes, ``if TYPE_CHECKING:`` blocks and
    ``try``/``except`` fallbacks are all recorded. Expressions are never
    entered, so deeply nested generated expressions cost nothing.
    """

    def __init__(self) -> None:
        self.imports: List[ImportSpec] = []

    def generic_visit(self, node: ast.AST) -> None:
        for child in ast.iter_child_nodes(node):
            if isinstance(child, _BODY_NODES):
                self.visit(child)

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self.imports.append(ImportSpec(
                level=0,
                module=alias.name,
                name=None,
                kind=ImportKind.IMPORT,
            ))

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        for alias in node.names:
            self.imports.append(ImportSpec(
                level=node.level or 0,
                module=node.module,
                name=alias.name,
                kind=ImportKind.IMPORT_FROM,
            ))


def parse_imports(source: str, filename: str = "<unknown>") -> List[ImportSpec]:
    """Return the import specs of *source* in statement order.

    Raises ``SyntaxError`` (or ``ValueError`` for sources containing NUL
    bytes on older interpreters) when the source cannot be parsed, and
    ``RecursionError`` when it nests deeper than the parser allows.
    """
    tree = ast.parse(source, filename=filename)
    collector = ImportCollector()
    collector.visit(tree)
    return collector.imports
