"""Balanced-span extraction tests."""

import pytest

from jsonrescue.core.extractor import (
    extract_balanced_span,
    find_opener,
    has_distinct_concatenated_objects,
    split_top_level_objects,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('Here you go: {"a": 1} hope it helps', '{"a": 1}'),
        ('[1, 2, [3]] trailing', "[1, 2, [3]]"),
        ('{"text": "a } inside"} after', '{"text": "a } inside"}'),
        ('prefix [{"a": "]"}] suffix', '[{"a": "]"}]'),
    ],
)
def test_extracts_first_span(text: str, expected: str) -> None:
    assert extract_balanced_span(text) == expected


def test_truncated_span_is_not_guessed() -> None:
    assert extract_balanced_span('{"a": [1, 2') is None


def test_no_opener() -> None:
    assert extract_balanced_span("just words") is None


def test_code_braces_are_skipped() -> None:
    text = 'if (x) else{ y } then {"real": true}'
    assert extract_balanced_span(text) == '{"real": true}'


def test_array_opener_needs_json_like_follower() -> None:
    text = "see [link](x) and [1, 2]"
    assert find_opener(text) == text.index("[1")


def test_split_top_level_objects() -> None:
    assert split_top_level_objects('{"a": 1}\n{"b": 2}') == ['{"a": 1}', '{"b": 2}']
    assert split_top_level_objects('{"a": 1}') is None
    assert split_top_level_objects('{"a": 1} and {"b": 2}') is None


def test_distinct_objects_detected() -> None:
    assert has_distinct_concatenated_objects('{"a": "x"} {"b": "y"}')
    assert not has_distinct_concatenated_objects('{"a": "x"} {"a": "x"}')
    assert not has_distinct_concatenated_objects('{"a": "x"}')
