"""
Text repair stages and the ordered pipeline that runs them.
"""
from .base import Sanitizer, SanitizerResult
from .characters import NormalizeCharacters
from .commas import AddMissingCommas, RemoveTrailingCommas
from .concatenation import CollapseConcatenationChains, NormalizeConcatenationChains
from .delimiters import FixMismatchedDelimiters
from .duplicates import CollapseDuplicateJsonObject
from .escapes import FixEscapeSequences
from .fences import RemoveCodeFences
from .literals import FixUnquotedLiterals
from .pipeline import SanitizerPipeline, build_resilient_pipeline, has_significant_steps
from .schema_unwrap import UnwrapJsonSchema
from .span import ExtractLargestJsonSpan
from .truncation import CompleteTruncatedStructures
from .whitespace import TrimWhitespace

__all__ = [
    'Sanitizer',
    'SanitizerResult',
    'NormalizeCharacters',
    'AddMissingCommas',
    'RemoveTrailingCommas',
    'CollapseConcatenationChains',
    'NormalizeConcatenationChains',
    'FixMismatchedDelimiters',
    'CollapseDuplicateJsonObject',
    'FixEscapeSequences',
    'RemoveCodeFences',
    'FixUnquotedLiterals',
    'SanitizerPipeline',
    'build_resilient_pipeline',
    'has_significant_steps',
    'UnwrapJsonSchema',
    'ExtractLargestJsonSpan',
    'CompleteTruncatedStructures',
    'TrimWhitespace',
]
