# jsonrescue/sanitizers/pipeline.py
"""
Ordered sanitizer pipeline.
Runs each registered sanitizer on the previous one's output and records a
step per sanitizer.
"""
from __future__ import annotations
from typing import Iterable, List
import logging

from ..core.config import DEFAULT_INSIGNIFICANT_STEPS
from ..core.results import PipelineResult, SanitizationStep
from .base import Sanitizer
from .characters import NormalizeCharacters
from .commas import AddMissingCommas, RemoveTrailingCommas
from .concatenation import NormalizeConcatenationChains
from .delimiters import FixMismatchedDelimiters
from .duplicates import CollapseDuplicateJsonObject
from .escapes import FixEscapeSequences
from .fences import RemoveCodeFences
from .literals import FixUnquotedLiterals
from .schema_unwrap import UnwrapJsonSchema
from .span import ExtractLargestJsonSpan
from .truncation import CompleteTruncatedStructures
from .whitespace import TrimWhitespace


logger = logging.getLogger(__name__)


class SanitizerPipeline:
    """
    Runs sanitizers in registration order.

    Order matters: earlier stages normalize the structure later stages rely
    on (fences and prose are gone before span extraction, delimiters are
    balanced before comma repair, and so on).
    """

    def __init__(self, sanitizers: Iterable[Sanitizer] = ()):
        self.sanitizers: List[Sanitizer] = []
        for sanitizer in sanitizers:
            self.register(sanitizer)

    def register(self, sanitizer: Sanitizer) -> None:
        if any(s.name == sanitizer.name for s in self.sanitizers):
            logger.warning(f"Sanitizer {sanitizer.name} registered twice")
        self.sanitizers.append(sanitizer)
        logger.debug(f"Registered: {sanitizer}")

    def run(self, text: str) -> PipelineResult:
        """
        Run every sanitizer over `text`.

        Args:
            text: Raw content

        Returns:
            PipelineResult with the final content and one step per sanitizer
        """
        content = text
        steps: List[SanitizationStep] = []
        for sanitizer in self.sanitizers:
            result = sanitizer.apply(content)
            steps.append(SanitizationStep(
                name=sanitizer.name,
                changed=result.changed,
                description=result.description,
                diagnostics=tuple(result.diagnostics),
            ))
            if result.changed:
                logger.debug(f"{sanitizer.name}: {'; '.join(result.diagnostics) or result.description}")
                content = result.content
        return PipelineResult(content=content, steps=steps)

    @property
    def names(self) -> List[str]:
        return [s.name for s in self.sanitizers]


def build_resilient_pipeline() -> SanitizerPipeline:
    """The full repair pipeline in its fixed order."""
    return SanitizerPipeline([
        RemoveCodeFences(),
        NormalizeCharacters(),
        ExtractLargestJsonSpan(),
        UnwrapJsonSchema(),
        CollapseDuplicateJsonObject(),
        FixMismatchedDelimiters(),
        FixUnquotedLiterals(),
        AddMissingCommas(),
        RemoveTrailingCommas(),
        NormalizeConcatenationChains(),
        FixEscapeSequences(),
        CompleteTruncatedStructures(),
        TrimWhitespace(),
    ])


def has_significant_steps(
    steps: Iterable[str],
    insignificant: frozenset = DEFAULT_INSIGNIFICANT_STEPS,
) -> bool:
    """True when any applied step is worth reporting."""
    return any(step not in insignificant for step in steps)
