# jsonrescue/sanitizers/base.py
"""
Base class for text repair stages.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List
import logging


@dataclass
class SanitizerResult:
    """Output of one sanitizer. Unchanged results carry the input verbatim."""
    content: str
    changed: bool
    description: str | None = None
    diagnostics: List[str] = field(default_factory=list)


class Sanitizer(ABC):
    """
    Abstract base class for a text-to-text repair stage.

    Each sanitizer:
    - Is stateless across calls (all scan state is local to `apply`)
    - Never raises on malformed input
    - Returns the input unchanged when it has nothing to fix
    """

    name: str = "sanitizer"
    description: str = ""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @abstractmethod
    def apply(self, text: str) -> SanitizerResult:
        """
        Repair `text`.

        Args:
            text: Input text (output of the previous stage)

        Returns:
            SanitizerResult describing the repair, if any
        """
        pass

    def unchanged(self, text: str) -> SanitizerResult:
        return SanitizerResult(content=text, changed=False)

    def result(self, before: str, after: str, diagnostics: List[str] | None = None) -> SanitizerResult:
        """Build a result, falling back to unchanged when nothing differs."""
        if after == before:
            return self.unchanged(before)
        return SanitizerResult(
            content=after,
            changed=True,
            description=self.description,
            diagnostics=list(diagnostics or []),
        )

    def __call__(self, text: str) -> SanitizerResult:
        return self.apply(text)

    def __str__(self) -> str:
        return self.name
