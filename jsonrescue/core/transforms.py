# jsonrescue/core/transforms.py
"""
Transforms applied to already-parsed values.

Schema unwrapping runs on every parsed value before validation. Numeric
coercion runs only after a failed schema validation, on the properties the
schema declares as numbers.
"""
from __future__ import annotations
from typing import Any, Callable, Iterable, List, Tuple
import re


JSON_SCHEMA_TYPE_VALUES = frozenset({
    "string", "number", "integer", "boolean", "object", "array", "null",
})

# keys that appear in JSON Schema documents but rarely in data
JSON_SCHEMA_META_KEYS = frozenset({
    "$schema", "additionalProperties", "required", "enum", "allOf", "anyOf",
    "oneOf", "items", "minLength", "maxLength", "minimum", "maximum",
    "pattern", "format", "default",
})

ENVELOPE_KEYS = JSON_SCHEMA_META_KEYS | {
    "type", "properties", "title", "description", "$id", "$defs", "definitions",
}

LEADING_NUMBER_RE = re.compile(r"^[~≈]?\s*(-?\d+(?:\.\d+)?)")
EMBEDDED_NUMBER_RE = re.compile(r"\b(-?\d+(?:\.\d+)?)\b")
STRICT_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")


def _has_meta_keys(obj: dict) -> bool:
    return any(key in JSON_SCHEMA_META_KEYS for key in obj)


def is_schema_field_definition(obj: Any) -> bool:
    """
    True for `{"type": "string", "description": <value>}` style field
    definitions whose description holds the actual value.
    """
    if not isinstance(obj, dict):
        return False
    if obj.get("type") not in JSON_SCHEMA_TYPE_VALUES or "description" not in obj:
        return False
    if "properties" in obj:
        return False
    return _has_meta_keys(obj) or len(obj) <= 3


def _is_extractable(value: Any) -> bool:
    """Whether a properties entry holds data or a definition carrying data."""
    if not isinstance(value, dict):
        return True
    if value.get("type") not in JSON_SCHEMA_TYPE_VALUES:
        return True
    return "description" in value or "properties" in value


def _has_extractable_properties(obj: dict) -> bool:
    properties = obj.get("properties")
    if not isinstance(properties, dict) or not properties:
        return False
    return any(_is_extractable(v) for v in properties.values())


def is_schema_object_with_data(obj: Any) -> bool:
    """A nested `type: object` schema node whose properties hold the data."""
    if not isinstance(obj, dict) or obj.get("type") != "object":
        return False
    return _has_meta_keys(obj) and _has_extractable_properties(obj)


def is_json_schema_envelope(value: Any) -> bool:
    """
    True for a top-level `{"type": "object", "properties": {...}}` wrapping data.

    Every other top-level key must be a schema keyword, and at least one
    property must hold data or a field definition with a description. A
    properties map of bare type declarations is a genuine schema.
    """
    if not isinstance(value, dict) or value.get("type") != "object":
        return False
    if any(key not in ENVELOPE_KEYS for key in value):
        return False
    return _has_extractable_properties(value)


def extract_schema_field_values(value: Any) -> Any:
    """Recursively replace schema field definitions with the values they carry."""
    if isinstance(value, list):
        return [extract_schema_field_values(item) for item in value]
    if not isinstance(value, dict):
        return value
    if is_schema_field_definition(value):
        return extract_schema_field_values(value["description"])
    if is_schema_object_with_data(value):
        return extract_schema_field_values(value["properties"])
    return {key: extract_schema_field_values(v) for key, v in value.items()}


def unwrap_json_schema_structure(value: Any) -> Any:
    """
    Return the data held in a schema-shaped answer, or the value itself.

    Handles a top-level envelope and field definitions at any depth:

        {"type": "object", "properties": {
            "purpose": {"type": "string", "description": "Actual purpose"},
            "count": {"type": "number", "description": 42}}}

    becomes `{"purpose": "Actual purpose", "count": 42}`.
    """
    result = value["properties"] if is_json_schema_envelope(value) else value
    result = extract_schema_field_values(result)
    return value if result == value else result


def extract_numeric_value(text: str) -> int | float | None:
    """
    Pull a number out of text such as "19", "~150 items" or "approximately 50".

    Returns:
        The number, or None when the text holds none
    """
    trimmed = text.strip()
    if STRICT_NUMBER_RE.fullmatch(trimmed):
        number = trimmed
    else:
        m = LEADING_NUMBER_RE.match(trimmed) or EMBEDDED_NUMBER_RE.search(trimmed)
        if not m:
            return None
        number = m.group(1)
    if re.fullmatch(r"-?\d+", number):
        return int(number)
    return float(number)


def coerce_numeric_properties(value: Any, numeric_names: Iterable[str]) -> Any:
    """
    Convert string values of numeric properties to numbers, at any depth.

    Property names are matched case-insensitively. Strings without a number
    are left as they are.
    """
    names = {name.lower() for name in numeric_names}

    def coerce(node: Any) -> Any:
        if isinstance(node, list):
            return [coerce(item) for item in node]
        if not isinstance(node, dict):
            return node
        result = {}
        for key, v in node.items():
            if key.lower() in names and isinstance(v, str) and v.strip():
                number = extract_numeric_value(v)
                if number is not None:
                    result[key] = number
                    continue
            result[key] = coerce(v)
        return result

    return coerce(value)


POST_PARSE_TRANSFORMS: List[Tuple[str, Callable[[Any], Any]]] = [
    ("unwrap_json_schema_structure", unwrap_json_schema_structure),
]


def apply_post_parse_transforms(value: Any) -> Tuple[Any, List[str]]:
    """
    Run every post-parse transform in order.

    Returns:
        Tuple of (transformed value, names of transforms that changed it)
    """
    applied = []
    for name, transform in POST_PARSE_TRANSFORMS:
        result = transform(value)
        if result is not value:
            applied.append(name)
            value = result
    return value, applied
