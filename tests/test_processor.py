"""End-to-end tests for JsonProcessor tiers, validation and repair logging."""

import logging

import pytest
from pydantic import BaseModel

from jsonrescue import (
    BadResponseContentError,
    JsonProcessingError,
    JsonProcessingErrorType,
    JsonProcessor,
    OutputFormat,
    ProcessingContext,
    ProcessorConfig,
    process_json,
)
from jsonrescue.core.logging_utils import read_runlog


class Vendor(BaseModel):
    name: str
    type: str


@pytest.fixture
def processor() -> JsonProcessor:
    return JsonProcessor()


def test_valid_json_takes_fast_path(processor: JsonProcessor) -> None:
    result = processor.process('  {"name": "Acme", "tags": [1, 2]}\n')
    assert result.tier == "fast"
    assert result.steps == []
    assert result.data == {"name": "Acme", "tags": [1, 2]}


def test_missing_comma_repaired_by_resilient_tier(processor: JsonProcessor) -> None:
    result = processor.process('{"name": "Acme"\n  "type": "vendor"}')
    assert result.tier == "resilient-sanitization"
    assert result.steps[0] == "resilient-sanitization"
    assert "add_missing_commas" in result.steps
    assert result.data == {"name": "Acme", "type": "vendor"}


def test_fenced_json_handled_by_extract_strategy(processor: JsonProcessor) -> None:
    result = processor.process('```json\n{"a": 1}\n```')
    assert result.tier == "extract"
    assert result.steps[0] == "extract"
    assert "remove_code_fences" in result.steps
    assert result.data == {"a": 1}


def test_concatenation_handled_by_light_strategy(processor: JsonProcessor) -> None:
    result = processor.process('{"path": BASE + "/x.ts"}')
    assert result.tier == "pre-concat+extract"
    assert "collapse_concatenation_chains" in result.steps
    assert result.data == {"path": "/x.ts"}


def test_duplicate_object_collapsed(processor: JsonProcessor) -> None:
    result = processor.process('{"a": "x"} {"a": "x"}')
    assert "collapse_duplicate_json_object" in result.steps
    assert result.data == {"a": "x"}


def test_distinct_objects_rejected(processor: JsonProcessor) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process('{"a": "x"} {"b": "y"}')
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.PARSE
    assert "multiple distinct" in str(error)
    assert error.applied_sanitizers[0] == "resilient-sanitization"


def test_prose_without_json_fails_immediately(processor: JsonProcessor) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process("I could not produce an answer for this request.")
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.PARSE
    assert "doesn't contain valid JSON content" in error.message
    assert error.applied_sanitizers == []


def test_unrepairable_input_carries_history(processor: JsonProcessor) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process('{"a": 1 2 3 }}}} :: [[')
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.PARSE
    assert error.applied_sanitizers[0] == "resilient-sanitization"
    assert error.original_content == '{"a": 1 2 3 }}}} :: [['
    assert error.underlying_error is not None
    assert isinstance(error.__cause__, ValueError)


@pytest.mark.parametrize("content", [{"a": 1}, b'{"a": 1}', None])
def test_non_text_content_rejected(processor: JsonProcessor, content) -> None:
    with pytest.raises(BadResponseContentError) as exc_info:
        processor.process(content, ProcessingContext(resource_name="summary"))
    assert str(exc_info.value).startswith("summary: expected text content")


def test_pydantic_model_validation(processor: JsonProcessor) -> None:
    context = ProcessingContext(resource_name="vendor", schema=Vendor)
    result = processor.process('```json\n{"name": "Acme", "type": "vendor"}\n```', context)
    assert isinstance(result.data, Vendor)
    assert result.data.name == "Acme"


def test_schema_failure_is_validation_error(processor: JsonProcessor) -> None:
    context = ProcessingContext(resource_name="vendor", schema=Vendor)
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process('{"name": "Acme"}', context)
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.VALIDATION
    assert [issue.path for issue in error.issues] == [("type",)]
    assert str(error).startswith("vendor: ")


class Module(BaseModel):
    name: str
    lines_of_code: int
    complexity: float | None = None


def test_numeric_text_coerced_after_failed_validation(processor: JsonProcessor) -> None:
    content = '{"name": "core", "lines_of_code": "~150 lines", "complexity": "approximately 2.5"}'
    result = processor.process(content, ProcessingContext(schema=Module))
    assert result.tier == "fast"
    assert result.data.lines_of_code == 150
    assert result.data.complexity == 2.5
    assert result.transforms == ["coerce_numeric_properties"]


def test_numeric_coercion_reaches_nested_models(processor: JsonProcessor) -> None:
    content = '```json\n[{"name": "a", "lines_of_code": "19 lines"}]\n```'
    result = processor.process(content, ProcessingContext(schema=list[Module]))
    assert [m.lines_of_code for m in result.data] == [19]
    assert "coerce_numeric_properties" in result.transforms


def test_numeric_text_without_number_still_fails(processor: JsonProcessor) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process('{"name": "core", "lines_of_code": "many"}', ProcessingContext(schema=Module))
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.VALIDATION
    assert [issue.path for issue in error.issues] == [("lines_of_code",)]


def test_type_annotation_schema_with_truncated_array(processor: JsonProcessor) -> None:
    result = processor.process("[1, 2, 3", ProcessingContext(schema=list[int]))
    assert result.data == [1, 2, 3]
    assert result.tier == "resilient-sanitization"
    assert "complete_truncated_structures" in result.steps


def test_text_mode_skips_parsing(processor: JsonProcessor) -> None:
    context = ProcessingContext(output_format=OutputFormat.TEXT, schema=Vendor)
    result = processor.process("Just some prose {not json}.", context)
    assert result.tier == "text"
    assert result.data == "Just some prose {not json}."


@pytest.mark.parametrize("content", ["42", '"just a sentence"', "null", "true"])
def test_structured_request_without_schema_needs_object_or_array(
    processor: JsonProcessor, content: str
) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process(content)
    error = exc_info.value
    assert error.type is JsonProcessingErrorType.VALIDATION
    assert error.issues[0].message.startswith("expected a JSON object or array")


def test_lone_surrogates_rejected(processor: JsonProcessor) -> None:
    with pytest.raises(JsonProcessingError) as exc_info:
        processor.process('{"a": "broken \ud800 text"}')
    assert exc_info.value.type is JsonProcessingErrorType.PARSE
    assert "malformed Unicode" in str(exc_info.value)

    assert processor.process('{"a": "\U0001F600"}').data == {"a": "\U0001F600"}


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (
            '{"type": "object", "properties": {"purpose": "x", "implementation": "y"}}',
            {"purpose": "x", "implementation": "y"},
        ),
        (
            '{"type": "object", "properties": {'
            '"purpose": {"type": "string", "description": "Actual purpose"}, '
            '"count": {"type": "number", "description": 42}}}',
            {"purpose": "Actual purpose", "count": 42},
        ),
        (
            '{"module": {"type": "object", "required": ["name"], "properties": '
            '{"name": {"type": "string", "description": "core"}}}, "files": 3}',
            {"module": {"name": "core"}, "files": 3},
        ),
    ],
)
def test_schema_shaped_answers_unwrapped_after_parse(
    processor: JsonProcessor, content: str, expected: dict
) -> None:
    result = processor.process(content)
    assert result.tier == "fast"
    assert result.data == expected
    assert result.transforms == ["unwrap_json_schema_structure"]


def test_schema_shaped_answer_unwrapped_by_resilient_tier(processor: JsonProcessor) -> None:
    content = '{"type": "object", "properties": {"purpose": {"type": "string", "description": "p"}}}'
    outcome = processor.parse_resilient(content)
    assert "unwrap_json_schema" in outcome.steps
    assert outcome.parsed == {"purpose": "p"}


def test_envelope_with_data_siblings_kept(processor: JsonProcessor) -> None:
    content = '{"type": "object", "properties": {"color": "red"}, "id": 5}'
    result = processor.process(content)
    assert result.data == {"type": "object", "properties": {"color": "red"}, "id": 5}
    assert result.transforms == []


def test_real_schema_is_not_unwrapped(processor: JsonProcessor) -> None:
    content = '{"type": "object", "properties": {"name": {"type": "string"}}}'
    result = processor.process(content)
    assert result.data["properties"] == {"name": {"type": "string"}}
    assert result.transforms == []


def test_repairs_logged_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.repairs")
    processor = JsonProcessor(logger=logger)
    with caplog.at_level(logging.WARNING, logger="tests.repairs"):
        processor.process('{"a": [1, 2,]\n "b": 2}', ProcessingContext(resource_name="plan"))
        processor.process('{"a": 1}')

    messages = [r.getMessage() for r in caplog.records if r.name == "tests.repairs"]
    assert len(messages) == 1
    assert messages[0].startswith("plan: applied ")
    assert "add_missing_commas" in messages[0]
    assert "Diagnostics: " in messages[0]


def test_fence_only_repairs_are_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.fences")
    processor = JsonProcessor(logger=logger)
    with caplog.at_level(logging.WARNING, logger="tests.fences"):
        result = processor.process('```json\n{"a": 1}\n```')
    assert result.steps == ["extract", "remove_code_fences"]
    assert not [r for r in caplog.records if r.name == "tests.fences"]


def test_repair_logging_can_be_disabled(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.quiet")
    processor = JsonProcessor(config=ProcessorConfig(log_repairs=False), logger=logger)
    with caplog.at_level(logging.WARNING, logger="tests.quiet"):
        processor.process('{"name": "Acme"\n "type": "vendor"}')
    assert not [r for r in caplog.records if r.name == "tests.quiet"]


def test_resilient_diagnostics_joined(processor: JsonProcessor) -> None:
    result = processor.process('{"a": [1, 2,]\n "b": 2}')
    assert result.data == {"a": [1, 2], "b": 2}
    assert "Inserted 1 missing comma(s)" in result.diagnostics
    assert "Removed 1 trailing comma(s)" in result.diagnostics
    assert " | " in result.diagnostics


def test_resilient_tier_matches_fast_path_on_valid_json(processor: JsonProcessor) -> None:
    document = '{"a": [1, {"b": null}], "c": "d + e"}'
    fast, tier = processor.parse(document)
    resilient = processor.parse_resilient(document)
    assert tier == "fast"
    assert resilient.parsed == fast.parsed
    assert resilient.steps == ["resilient-sanitization"]
    assert resilient.resilient_diagnostics is None


def test_runlog_records_successes_and_failures(tmp_path) -> None:
    path = str(tmp_path / "logs" / "runs.jsonl")
    processor = JsonProcessor(config=ProcessorConfig(runlog_path=path))
    processor.process('{"a": 1}', ProcessingContext(resource_name="first"))
    with pytest.raises(JsonProcessingError):
        processor.process("nothing here", ProcessingContext(resource_name="second"))

    entries = read_runlog(path)
    assert [e["resource_name"] for e in entries] == ["first", "second"]
    assert entries[0]["success"] is True
    assert entries[0]["tier"] == "fast"
    assert entries[1]["success"] is False
    assert entries[1]["error"]["type"] == "parse"
    assert "timestamp" in entries[1]


def test_process_json_helper() -> None:
    result = process_json('Sure! {"ok": true}', ProcessingContext(resource_name="probe"))
    assert result.data == {"ok": True}
    assert result.tier == "extract"
