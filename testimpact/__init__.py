"""testimpact: pick the tests a change can plausibly break, from imports alone."""

from __future__ import annotations

__version__ = "0.3.0"

from .graph import impacted_tests
from .index import ProjectIndex
from .models import ImportKind, ImportSpec, ModuleInfo, TestResult
from .priority import Priority, priority

__all__ = [
    "ImportKind",
    "ImportSpec",
    "ModuleInfo",
    "Priority",
    "ProjectIndex",
    "TestResult",
    "__version__",
    "impacted_tests",
    "priority",
]
