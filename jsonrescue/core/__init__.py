"""
Core modules for JSON recovery: scanning, extraction, validation and results.
"""
from .config import OutputFormat, ProcessingContext, ProcessorConfig
from .errors import BadResponseContentError, JsonProcessingError, JsonProcessingErrorType
from .extractor import extract_balanced_span, has_distinct_concatenated_objects
from .results import (
    ParsingOutcome,
    PipelineResult,
    ProcessingResult,
    SanitizationStep,
    ValidationIssue,
    ValidationResult,
)
from .scanner import is_in_string, iter_string_states
from .transforms import apply_post_parse_transforms, unwrap_json_schema_structure
from .validator import is_generated_content, validate_json

__all__ = [
    'OutputFormat',
    'ProcessingContext',
    'ProcessorConfig',
    'BadResponseContentError',
    'JsonProcessingError',
    'JsonProcessingErrorType',
    'extract_balanced_span',
    'has_distinct_concatenated_objects',
    'ParsingOutcome',
    'PipelineResult',
    'ProcessingResult',
    'SanitizationStep',
    'ValidationIssue',
    'ValidationResult',
    'is_in_string',
    'iter_string_states',
    'apply_post_parse_transforms',
    'unwrap_json_schema_structure',
    'is_generated_content',
    'validate_json',
]
