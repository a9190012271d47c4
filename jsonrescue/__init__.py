"""
jsonrescue: recovery parsing, sanitization and validation of generated JSON.
"""
from .core.config import OutputFormat, ProcessingContext, ProcessorConfig
from .core.errors import BadResponseContentError, JsonProcessingError, JsonProcessingErrorType
from .core.processor import JsonProcessor, process_json
from .core.results import ProcessingResult, ValidationIssue
from .sanitizers.pipeline import build_resilient_pipeline

__version__ = "0.1.0"

__all__ = [
    'OutputFormat',
    'ProcessingContext',
    'ProcessorConfig',
    'BadResponseContentError',
    'JsonProcessingError',
    'JsonProcessingErrorType',
    'JsonProcessor',
    'process_json',
    'ProcessingResult',
    'ValidationIssue',
    'build_resilient_pipeline',
]
