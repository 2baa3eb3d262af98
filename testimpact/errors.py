"""Exceptions raised by testimpact."""

from __future__ import annotations


class TestImpactError(Exception):
    """Base class for fatal, whole-invocation errors."""

    __test__ = False


class ConfigError(TestImpactError):
    pass


class PathEncodingError(TestImpactError):
    """A path cannot be represented as UTF-8."""


class GitError(TestImpactError):
    pass


class ReportError(TestImpactError):
    pass


class WarningsAsErrors(TestImpactError):
    """Raised after selection when warnings were recorded and escalation is on."""

    def __init__(self, count: int, first: str) -> None:
        self.count = count
        self.first = first
        super().__init__(
            f"Warnings treated as errors ({count} warnings). First: {first}"
        )
