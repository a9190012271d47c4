# jsonrescue/sanitizers/duplicates.py
"""
Collapses an object that was emitted twice back to back.
"""
from __future__ import annotations

from ..core.extractor import split_top_level_objects
from .base import Sanitizer, SanitizerResult


class CollapseDuplicateJsonObject(Sanitizer):
    """Keep one copy when the text is the same object repeated."""

    name = "collapse_duplicate_json_object"
    description = "Collapsed duplicated JSON object"

    def apply(self, text: str) -> SanitizerResult:
        spans = split_top_level_objects(text)
        if not spans or any(span != spans[0] for span in spans[1:]):
            return self.unchanged(text)
        return self.result(text, spans[0], [f"Collapsed {len(spans)} identical objects into one"])
