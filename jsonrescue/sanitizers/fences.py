# jsonrescue/sanitizers/fences.py
"""
Removes markdown code fences, thought markers and introductory prose that
precede the JSON payload.
"""
from __future__ import annotations
import json
import re

from ..core.extractor import find_opener
from ..core.scanner import map_outside_strings
from .base import Sanitizer, SanitizerResult

FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_+-]+(?=[ \t]*\r?\n))?[ \t]*")
CTRL_THOUGHT_RE = re.compile(r"<ctrl\d+>\s*thought\s*\n", re.IGNORECASE)
THOUGHT_MARKER_RE = re.compile(r"^\s*(?:thought|thinking)\s*:?\s*\n", re.IGNORECASE)
HAS_ALPHA_RE = re.compile(r"[A-Za-z]")


def _is_valid_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


class RemoveCodeFences(Sanitizer):
    """Strip fences and prose wrapped around the payload."""

    name = "remove_code_fences"
    description = "Removed code fences and text preceding the JSON"

    def apply(self, text: str) -> SanitizerResult:
        if not text or _is_valid_json(text):
            return self.unchanged(text)

        diagnostics = []
        sanitized = text

        if "```" in sanitized:
            start = find_opener(sanitized)
            if start == -1:
                stripped = FENCE_RE.sub("", sanitized)
            else:
                head = FENCE_RE.sub("", sanitized[:start])
                body = map_outside_strings(sanitized[start:], lambda seg: FENCE_RE.sub("", seg))
                stripped = head + body
            if stripped != sanitized:
                diagnostics.append("Removed code fences")
                sanitized = stripped

        without_thoughts = THOUGHT_MARKER_RE.sub("", CTRL_THOUGHT_RE.sub("", sanitized), count=1)
        if without_thoughts != sanitized:
            diagnostics.append("Removed thought markers")
            sanitized = without_thoughts

        start = find_opener(sanitized)
        if start > 0:
            head = sanitized[:start]
            # a top-level string literal is content, not prose
            if HAS_ALPHA_RE.search(head) and not head.lstrip().startswith('"'):
                diagnostics.append(f"Removed introductory text {head.strip()[:60]!r}")
                sanitized = sanitized[start:]

        return self.result(text, sanitized, diagnostics)
