# jsonrescue/sanitizers/schema_unwrap.py
"""
Replaces a schema-shaped answer with the data it carries.

Generators sometimes answer with `{"type": "object", "properties": {...}}`
where the properties map holds the actual values, either directly or as
`{"type": "string", "description": <value>}` field definitions.
"""
from __future__ import annotations
import json

from ..core.transforms import is_json_schema_envelope, unwrap_json_schema_structure
from .base import Sanitizer, SanitizerResult


class UnwrapJsonSchema(Sanitizer):

    name = "unwrap_json_schema"
    description = "Unwrapped JSON Schema structure to the data it contains"

    def apply(self, text: str) -> SanitizerResult:
        try:
            value = json.loads(text)
        except ValueError:
            return self.unchanged(text)

        unwrapped = unwrap_json_schema_structure(value)
        if unwrapped is value:
            return self.unchanged(text)

        if is_json_schema_envelope(value):
            diagnostic = f"Unwrapped {len(value['properties'])} property(ies) from a schema envelope"
        else:
            diagnostic = "Extracted values from schema field definitions"
        return self.result(text, json.dumps(unwrapped, ensure_ascii=False, indent=2), [diagnostic])
