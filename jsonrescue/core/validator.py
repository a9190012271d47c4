# jsonrescue/core/validator.py
"""
Validation of parsed values against the expected schema.
Uses Pydantic models or type annotations for structured responses.
"""
from __future__ import annotations
from types import UnionType
from typing import Any, List, Set, Union, get_args, get_origin
import logging

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import ProcessingContext
from .results import ValidationIssue, ValidationResult
from .transforms import coerce_numeric_properties


logger = logging.getLogger(__name__)

COERCE_NUMERIC = "coerce_numeric_properties"


def is_generated_content(value: Any) -> bool:
    """
    Whether a value is a plausible free-text generation result.

    Strings, arrays, objects and null qualify; bare numbers and booleans
    do not.
    """
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, list, dict))


def issues_from_validation_error(error: ValidationError) -> List[ValidationIssue]:
    return [
        ValidationIssue(path=tuple(err.get("loc", ())), message=err.get("msg", "invalid value"))
        for err in error.errors()
    ]


def _is_model(schema: Any) -> bool:
    try:
        return isinstance(schema, type) and issubclass(schema, BaseModel)
    except TypeError:
        # generic aliases such as list[int] pass isinstance(..., type) on 3.10
        return False


def _is_numeric_annotation(annotation: Any) -> bool:
    if annotation in (int, float):
        return True
    if get_origin(annotation) in (Union, UnionType):
        return any(_is_numeric_annotation(arg) for arg in get_args(annotation) if arg is not type(None))
    return False


def numeric_field_names(schema: Any, _seen: Set[type] | None = None) -> Set[str]:
    """
    Lower-cased names of every int/float field declared by a schema.

    Walks nested models, including those inside containers and unions
    (`list[Model]`, `Model | None`).
    """
    seen = _seen if _seen is not None else set()
    names: Set[str] = set()
    if _is_model(schema):
        if schema in seen:
            return names
        seen.add(schema)
        for name, field_info in schema.model_fields.items():
            if _is_numeric_annotation(field_info.annotation):
                names.add(name.lower())
                if field_info.alias:
                    names.add(field_info.alias.lower())
            names |= numeric_field_names(field_info.annotation, seen)
        return names
    for arg in get_args(schema):
        names |= numeric_field_names(arg, seen)
    return names


def _validate_once(value: Any, schema: Any) -> ValidationResult:
    try:
        if _is_model(schema):
            validated = schema.model_validate(value)
        else:
            validated = TypeAdapter(schema).validate_python(value)
    except ValidationError as e:
        return ValidationResult.failed(issues_from_validation_error(e))
    return ValidationResult.ok(validated)


def validate_against_schema(value: Any, schema: Any) -> ValidationResult:
    """
    Validate `value` with a Pydantic model class or any type annotation.

    When the first attempt fails, numeric fields holding text such as
    "~150 items" are converted to numbers and validation runs once more.

    Returns:
        ValidationResult carrying the model instance / adapted value and the
        repairs it needed, or the issues reported by Pydantic
    """
    result = _validate_once(value, schema)
    if result.success:
        return result

    numeric = numeric_field_names(schema)
    coerced = coerce_numeric_properties(value, numeric) if numeric else value
    if coerced == value:
        logger.debug(f"Schema validation failed with {len(result.issues)} issue(s)")
        return result

    retry = _validate_once(coerced, schema)
    if not retry.success:
        logger.debug(f"Schema validation failed after numeric coercion with {len(retry.issues)} issue(s)")
        return retry
    retry.transforms.append(COERCE_NUMERIC)
    return retry


def validate_json(value: Any, context: ProcessingContext) -> ValidationResult:
    """
    Validate a parsed value for the given request context.

    Structured requests with a schema are checked against it. Structured
    requests without one need an object or array. Text requests only need
    to look like generated content.
    """
    if context.expects_text:
        if is_generated_content(value):
            return ValidationResult.ok(value)
        return ValidationResult.failed([
            ValidationIssue(
                path=(),
                message=f"expected generated content (string, array, object or null), got {type(value).__name__}",
            )
        ])

    if context.schema is not None:
        return validate_against_schema(value, context.schema)

    if isinstance(value, (dict, list)):
        return ValidationResult.ok(value)
    return ValidationResult.failed([
        ValidationIssue(
            path=(),
            message=f"expected a JSON object or array, got {type(value).__name__}",
        )
    ])
