# jsonrescue/sanitizers/delimiters.py
"""
Repairs closing delimiters that do not match the innermost open structure.
"""
from __future__ import annotations

from ..core.extractor import PAIRS
from ..core.scanner import iter_string_states
from .base import Sanitizer, SanitizerResult


def _next_significant(text: str, start: int) -> str:
    for ch in text[start:]:
        if not ch.isspace() and ch != ",":
            return ch
    return ""


class FixMismatchedDelimiters(Sanitizer):
    """
    Stack-based closer repair.

    A `}` or `]` that does not match the top of the open-delimiter stack is
    replaced with the expected closer. A `]` met where `}` is expected, with
    an open `[` directly below and a quoted member next, closes both.
    Closers with nothing open are left for other stages.
    """

    name = "fix_mismatched_delimiters"
    description = "Fixed mismatched closing delimiters"

    def apply(self, text: str) -> SanitizerResult:
        out = []
        stack = []
        diagnostics = []

        for i, ch, in_str in iter_string_states(text):
            if in_str or ch not in "{[]}":
                out.append(ch)
                continue
            if ch in PAIRS:
                stack.append(ch)
                out.append(ch)
                continue
            if not stack:
                out.append(ch)
                continue

            expected = PAIRS[stack[-1]]
            if ch == expected:
                stack.pop()
                out.append(ch)
            elif (
                ch == "]"
                and expected == "}"
                and len(stack) >= 2
                and stack[-2] == "["
                and _next_significant(text, i + 1) == '"'
            ):
                stack.pop()
                stack.pop()
                out.append("}]")
                diagnostics.append(f"Inserted missing '}}' before ']' at position {i}")
            else:
                stack.pop()
                out.append(expected)
                diagnostics.append(f"Replaced '{ch}' with '{expected}' at position {i}")

        return self.result(text, "".join(out), diagnostics)
