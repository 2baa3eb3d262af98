"""Warning collection for a single analysis run."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class Diagnostics:
    """Owned, ordered collector of non-fatal warnings.

    ``quiet`` only silences output; warnings are always recorded so that
    warnings-as-errors can still see them.
    """

    def __init__(
        self,
        warnings: Optional[Iterable[str]] = None,
        quiet: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        self.warnings: List[str] = list(warnings or [])
        self.quiet = quiet
        self.console = console or Console(stderr=True, highlight=False, soft_wrap=True)

    def warn(self, message: str) -> None:
        logger.debug("warning recorded: %s", message)
        self.warnings.append(message)

    def emit(self) -> None:
        if self.quiet:
            return
        for message in self.warnings:
            self.console.print(f"Warning: {message}", markup=False)

    def note(self, message: str) -> None:
        """Print *message* without recording it as a warning."""
        if not self.quiet:
            self.console.print(message, markup=False)
