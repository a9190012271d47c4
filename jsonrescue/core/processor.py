# jsonrescue/core/processor.py
"""
Recovery parsing of generated JSON.

Tries, in order:
- the fast path: parse the trimmed text as-is
- light strategies: fence stripping and span extraction, optionally after
  collapsing concatenation chains
- the resilient tier: the full sanitizer pipeline

then applies post-parse transforms and validates the result. Every
terminal failure raises JsonProcessingError carrying the repair history.
"""
from __future__ import annotations
from typing import Any, List, Tuple
import json
import logging

from ..sanitizers.concatenation import CollapseConcatenationChains
from ..sanitizers.fences import RemoveCodeFences
from ..sanitizers.pipeline import SanitizerPipeline, build_resilient_pipeline, has_significant_steps
from ..sanitizers.span import ExtractLargestJsonSpan
from .config import ProcessingContext, ProcessorConfig
from .errors import BadResponseContentError, JsonProcessingError, JsonProcessingErrorType
from .extractor import has_distinct_concatenated_objects, has_json_opener
from .logging_utils import append_runlog
from .results import ParsingOutcome, ProcessingResult
from .transforms import apply_post_parse_transforms
from .validator import validate_json


logger = logging.getLogger(__name__)

FAST_TIER = "fast"
TEXT_TIER = "text"
RESILIENT_STRATEGY = "resilient-sanitization"


def has_lone_surrogates(text: str) -> bool:
    """Surrogate code points only survive in a str when they are unpaired."""
    return any("\ud800" <= ch <= "\udfff" for ch in text)


def build_light_strategies() -> List[Tuple[str, SanitizerPipeline]]:
    """Named lightweight strategies tried before the full pipeline."""
    return [
        ("extract", SanitizerPipeline([
            RemoveCodeFences(),
            ExtractLargestJsonSpan(),
        ])),
        ("pre-concat+extract", SanitizerPipeline([
            RemoveCodeFences(),
            CollapseConcatenationChains(),
            ExtractLargestJsonSpan(),
        ])),
    ]


class JsonProcessor:
    """
    Turns generated text into validated data.

    Holds no per-request state; one instance can serve concurrent callers.
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        logger: logging.Logger | None = None,
        pipeline: SanitizerPipeline | None = None,
    ):
        """
        Initialize the processor.

        Args:
            config: Processor settings (defaults to ProcessorConfig())
            logger: Logger that receives repair warnings
            pipeline: Resilient pipeline (defaults to the full pipeline)
        """
        self.config = config or ProcessorConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.pipeline = pipeline or build_resilient_pipeline()
        self.strategies = build_light_strategies()

    def process(self, content: Any, context: ProcessingContext | None = None) -> ProcessingResult:
        """
        Parse and validate one generated response.

        Args:
            content: Raw generated text
            context: Resource name, output format and schema

        Returns:
            ProcessingResult with the validated data and applied steps

        Raises:
            BadResponseContentError: If content is not a string
            JsonProcessingError: If content holds lone surrogates or cannot be
                parsed or validated
        """
        context = context or ProcessingContext()
        if not isinstance(content, str):
            raise BadResponseContentError(context.resource_name, content)

        try:
            if has_lone_surrogates(content):
                raise JsonProcessingError(
                    JsonProcessingErrorType.PARSE,
                    context.resource_name,
                    "response contains malformed Unicode (lone surrogates)",
                    original_content=content,
                )
            if context.expects_text:
                result = self._process_text(content, context)
            else:
                outcome, tier = self.parse(content, context.resource_name)
                result = self._validate(outcome, tier, content, context)
        except JsonProcessingError as e:
            self._record(context, content, error=e)
            raise

        self._log_repairs(context, result)
        self._record(context, content, result=result)
        return result

    def parse(self, content: str, resource_name: str = "response") -> Tuple[ParsingOutcome, str]:
        """
        Run the parse tiers in order until one succeeds.

        Returns:
            Tuple of (parsing outcome, name of the tier that succeeded)

        Raises:
            JsonProcessingError: PARSE error when every tier fails
        """
        trimmed = content.strip()
        try:
            return ParsingOutcome(parsed=json.loads(trimmed), content=trimmed), FAST_TIER
        except ValueError:
            pass

        if not has_json_opener(trimmed):
            raise JsonProcessingError(
                JsonProcessingErrorType.PARSE,
                resource_name,
                "response doesn't contain valid JSON content",
                original_content=content,
                sanitized_content=trimmed,
            )

        for name, strategy in self.strategies:
            run = strategy.run(trimmed)
            try:
                parsed = json.loads(run.content)
            except ValueError:
                continue
            self.logger.debug(f"{resource_name}: parsed with strategy {name}")
            return ParsingOutcome(parsed=parsed, steps=[name, *run.applied], content=run.content), name

        return self.parse_resilient(content, resource_name), RESILIENT_STRATEGY

    def parse_resilient(self, content: str, resource_name: str = "response") -> ParsingOutcome:
        """
        Run the full sanitizer pipeline and parse its output.

        Raises:
            JsonProcessingError: PARSE error when the output still does not
                parse or holds several distinct top-level objects
        """
        run = self.pipeline.run(content)
        steps = [RESILIENT_STRATEGY, *run.applied]
        diagnostics = " | ".join(run.diagnostics) or None

        if has_distinct_concatenated_objects(run.content):
            raise JsonProcessingError(
                JsonProcessingErrorType.PARSE,
                resource_name,
                "response contains multiple distinct JSON objects; refusing to pick one",
                original_content=content,
                sanitized_content=run.content,
                applied_sanitizers=steps,
            )

        try:
            parsed = json.loads(run.content)
        except ValueError as e:
            raise JsonProcessingError(
                JsonProcessingErrorType.PARSE,
                resource_name,
                f"cannot parse JSON after {len(run.applied)} sanitization step(s): {e}",
                original_content=content,
                sanitized_content=run.content,
                applied_sanitizers=steps,
                underlying_error=e,
            ) from e

        return ParsingOutcome(parsed=parsed, steps=steps, resilient_diagnostics=diagnostics, content=run.content)

    def _validate(
        self,
        outcome: ParsingOutcome,
        tier: str,
        content: str,
        context: ProcessingContext,
    ) -> ProcessingResult:
        data, transforms = apply_post_parse_transforms(outcome.parsed)
        validation = validate_json(data, context)
        if not validation.success:
            raise JsonProcessingError(
                JsonProcessingErrorType.VALIDATION,
                context.resource_name,
                f"JSON failed schema validation: {validation.summary()}",
                original_content=content,
                sanitized_content=outcome.content,
                applied_sanitizers=outcome.steps,
                issues=validation.issues,
            )
        return ProcessingResult(
            data=validation.data,
            tier=tier,
            steps=outcome.steps,
            diagnostics=outcome.resilient_diagnostics,
            transforms=[*transforms, *validation.transforms],
        )

    def _process_text(self, content: str, context: ProcessingContext) -> ProcessingResult:
        validation = validate_json(content, context)
        if not validation.success:
            raise JsonProcessingError(
                JsonProcessingErrorType.VALIDATION,
                context.resource_name,
                f"response is not valid generated content: {validation.summary()}",
                original_content=content,
                issues=validation.issues,
            )
        return ProcessingResult(data=validation.data, tier=TEXT_TIER)

    def _log_repairs(self, context: ProcessingContext, result: ProcessingResult) -> None:
        if not self.config.log_repairs:
            return
        # steps[0] names the strategy; only the sanitizers that fired count
        if not has_significant_steps(result.steps[1:], self.config.insignificant_steps):
            return
        message = (
            f"{context.resource_name}: applied {len(result.steps)} sanitization step(s): "
            f"{' -> '.join(result.steps)}"
        )
        if result.diagnostics:
            message += f" | Diagnostics: {result.diagnostics}"
        self.logger.warning(message)

    def _record(
        self,
        context: ProcessingContext,
        content: str,
        result: ProcessingResult | None = None,
        error: JsonProcessingError | None = None,
    ) -> None:
        if not self.config.runlog_path:
            return
        entry = {
            **context.to_dict(),
            "content_length": len(content),
            "success": error is None,
        }
        if result is not None:
            entry.update(result.to_dict())
        if error is not None:
            entry["error"] = error.to_dict()
        try:
            append_runlog(self.config.runlog_path, entry)
        except OSError as e:
            self.logger.warning(f"Failed to append run log {self.config.runlog_path}: {e}")


def process_json(
    content: Any,
    context: ProcessingContext | None = None,
    config: ProcessorConfig | None = None,
    logger: logging.Logger | None = None,
) -> ProcessingResult:
    """Process one response with a fresh JsonProcessor."""
    return JsonProcessor(config=config, logger=logger).process(content, context)
