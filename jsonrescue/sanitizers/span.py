# jsonrescue/sanitizers/span.py
"""
Cuts the text down to its first balanced JSON object or array.
"""
from __future__ import annotations
import json

from ..core.extractor import find_balanced_span, split_top_level_objects
from .base import Sanitizer, SanitizerResult


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


class ExtractLargestJsonSpan(Sanitizer):

    name = "extract_largest_json_span"
    description = "Extracted the JSON object/array from surrounding text"

    def apply(self, text: str) -> SanitizerResult:
        stripped = text.strip()
        if _parses(stripped):
            return self.unchanged(text)
        # back-to-back objects are left for duplicate collapsing
        if split_top_level_objects(stripped):
            return self.unchanged(text)

        bounds = find_balanced_span(text)
        if bounds is None:
            return self.unchanged(text)
        start, end = bounds
        span = text[start:end]
        if span == stripped:
            return self.unchanged(text)
        # an unparseable span followed by more closers was cut short by a
        # mismatched delimiter; keep the whole text for delimiter repair
        if not _parses(span) and any(c in "}]" for c in text[end:]):
            return self.unchanged(text)

        dropped = len(stripped) - len(span)
        return self.result(text, span, [f"Dropped {dropped} character(s) around the JSON span"])
