"""Fixture tests for comma, concatenation, escape and truncation repair."""

import json

import pytest

from jsonrescue.sanitizers import (
    AddMissingCommas,
    CollapseConcatenationChains,
    CompleteTruncatedStructures,
    FixEscapeSequences,
    NormalizeConcatenationChains,
    RemoveTrailingCommas,
)


# ---------------------------------------------------------------------------
# Commas
# ---------------------------------------------------------------------------

def test_missing_comma_between_properties() -> None:
    result = AddMissingCommas().apply('{"name": "Acme"\n  "type": "vendor"}')
    assert result.changed
    assert result.content == '{"name": "Acme",\n  "type": "vendor"}'


def test_missing_commas_between_array_elements() -> None:
    text = '[\n  1\n  2\n  {"a": true}\n  [3]\n]'
    result = AddMissingCommas().apply(text)
    assert json.loads(result.content) == [1, 2, {"a": True}, [3]]
    assert result.diagnostics == ["Inserted 3 missing comma(s)"]


@pytest.mark.parametrize(
    "text",
    [
        '{"a": [1, 2], "b": {"c": null}}',
        '{"a": "x\\n\\"y\\"" , "b": "1 2"}',
        '{"a": "x" "y"}',
        '{"a": 1}\n{"b": 2}',
    ],
)
def test_commas_left_alone(text: str) -> None:
    result = AddMissingCommas().apply(text)
    assert not result.changed
    assert result.content == text


def test_trailing_commas_removed_outside_strings() -> None:
    result = RemoveTrailingCommas().apply('{"a": [1, 2,], "b": "x,]",}')
    assert result.content == '{"a": [1, 2], "b": "x,]"}'
    assert result.diagnostics == ["Removed 2 trailing comma(s)"]


# ---------------------------------------------------------------------------
# Concatenation chains
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"path": BASE + "/x.ts"}', '{"path": "/x.ts"}'),
        ('{"a": FOO + BAR, "b": 1}', '{"a": "", "b": 1}'),
        ('["a" + "b" + "c"]', '["abc"]'),
        ('{"x": "short" + NAME + "much longer"}', '{"x": "much longer"}'),
        ('{"x": "first" +\n    config.suffix()\n}', '{"x": "first"\n}'),
    ],
)
def test_chains_collapsed(text: str, expected: str) -> None:
    result = NormalizeConcatenationChains().apply(text)
    assert result.content == expected


def test_plus_inside_strings_and_numbers_untouched() -> None:
    text = '{"expr": "a + b", "n": 1e+5}'
    assert not NormalizeConcatenationChains().apply(text).changed


def test_light_collapse_reports_its_own_name() -> None:
    sanitizer = CollapseConcatenationChains()
    assert sanitizer.name == "collapse_concatenation_chains"
    assert sanitizer.apply('{"p": A + "b"}').content == '{"p": "b"}'


# ---------------------------------------------------------------------------
# Escapes
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (r"""{"a": "it\\\'s"}""", """{"a": "it's"}"""),
        (r'{"a": "it\'s"}', """{"a": "it's"}"""),
        (r'{"re": "\d+\s"}', r'{"re": "\\d+\\s"}'),
        (r'{"a": "\u12"}', r'{"a": "\\u12"}'),
        (r'{"a": "x\0y"}', r'{"a": "x\u0000y"}'),
        (r'{"a": "x\ y"}', '{"a": "x y"}'),
        (r'{"a": "f(x\, y\)"}', '{"a": "f(x, y)"}'),
        ('{"a": "line1\nline2\tend"}', r'{"a": "line1\nline2\tend"}'),
    ],
)
def test_escape_repairs(text: str, expected: str) -> None:
    result = FixEscapeSequences().apply(text)
    assert result.content == expected
    json.loads(result.content)


@pytest.mark.parametrize(
    "text",
    [
        r'{"a": "q\"t\\ \/ \n \u00e9"}',
        r'{"a": 1} \q',
        r'{"path": "C:\\temp\\new"}',
    ],
)
def test_valid_escapes_untouched(text: str) -> None:
    assert not FixEscapeSequences().apply(text).changed


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------

DOCUMENT = (
    '{"name": "Acme", "tags": ["a", "b"], '
    '"meta": {"n": 12.5, "ok": true, "note": "x\\"y"}}'
)


def test_every_prefix_completes_to_valid_json() -> None:
    original = json.loads(DOCUMENT)
    completer = CompleteTruncatedStructures()
    for cut in range(1, len(DOCUMENT)):
        result = completer.apply(DOCUMENT[:cut])
        recovered = json.loads(result.content)
        assert isinstance(recovered, dict)
        assert list(recovered) == list(original)[:len(recovered)]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("[1, 2, 3", [1, 2, 3]),
        ("[1, 2, ", [1, 2]),
        ('[1, 2, {"a": tr', [1, 2, {}]),
        ('{"a": "abc\\u00', {"a": "abc"}),
        ('{"a": 1, "b": -', {"a": 1}),
        ('{"a": {"b": [', {"a": {"b": []}}),
        ('{"a": 1, "key', {"a": 1}),
    ],
)
def test_truncated_structures_completed(text: str, expected) -> None:
    assert json.loads(CompleteTruncatedStructures().apply(text).content) == expected


def test_complete_document_untouched() -> None:
    assert not CompleteTruncatedStructures().apply(DOCUMENT).changed
