# jsonrescue/sanitizers/whitespace.py
from __future__ import annotations

from .base import Sanitizer, SanitizerResult


class TrimWhitespace(Sanitizer):

    name = "trim_whitespace"
    description = "Trimmed surrounding whitespace"

    def apply(self, text: str) -> SanitizerResult:
        return self.result(text, text.strip())
