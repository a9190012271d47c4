# jsonrescue/core/extractor.py
"""
Balanced-span extraction for JSON embedded in prose, fences or code.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

from .scanner import iter_string_states

PAIRS = {"{": "}", "[": "]"}

_OBJECT_FOLLOWERS = set(' \t\r\n"}')
_ARRAY_FOLLOWERS = set(' \t\r\n]"{[-0123456789tfn')


def _is_viable_opener(text: str, i: int) -> bool:
    ch = text[i]
    nxt = text[i + 1] if i + 1 < len(text) else ""
    if ch == "{":
        # code such as `else{` or `function(){`
        if i > 0 and text[i - 1].isalpha():
            return False
        return nxt == "" or nxt in _OBJECT_FOLLOWERS or nxt.isalpha()
    return nxt == "" or nxt in _ARRAY_FOLLOWERS


def find_opener(text: str, start: int = 0) -> int:
    """Index of the first viable `{` or `[` at or after `start`, or -1."""
    for i in range(start, len(text)):
        if text[i] in PAIRS and _is_viable_opener(text, i):
            return i
    return -1


def has_json_opener(text: str) -> bool:
    return "{" in text or "[" in text


def _match_close(text: str, start: int) -> int:
    open_ch = text[start]
    close_ch = PAIRS[open_ch]
    depth = 0
    for i, ch, in_str in iter_string_states(text, start):
        if in_str:
            continue
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def find_balanced_span(text: str) -> Optional[Tuple[int, int]]:
    """
    Locate the first balanced `{...}` or `[...]` span.

    Depth is counted on the opener's delimiter family only and delimiters
    inside strings are ignored.

    Returns:
        (start, end) with `end` exclusive, or None when the span never closes
    """
    start = find_opener(text)
    if start == -1:
        return None
    end = _match_close(text, start)
    if end == -1 or PAIRS[text[start]] != text[end]:
        return None
    return start, end + 1


def extract_balanced_span(text: str) -> Optional[str]:
    """Return the first balanced JSON span in `text`, or None."""
    bounds = find_balanced_span(text)
    if bounds is None:
        return None
    start, end = bounds
    return text[start:end]


def split_top_level_objects(text: str) -> Optional[List[str]]:
    """
    Split text made only of back-to-back `{...}` objects.

    Returns the object spans when the whole stripped text is two or more
    balanced objects separated by whitespace, otherwise None.
    """
    s = text.strip()
    spans: List[str] = []
    pos = 0
    while pos < len(s):
        if s[pos] != "{":
            return None
        end = _match_close(s, pos)
        if end == -1:
            return None
        spans.append(s[pos:end + 1])
        pos = end + 1
        while pos < len(s) and s[pos].isspace():
            pos += 1
    return spans if len(spans) >= 2 else None


def has_distinct_concatenated_objects(text: str) -> bool:
    """True when text is several top-level objects that are not all identical."""
    spans = split_top_level_objects(text)
    if not spans:
        return False
    return any(span != spans[0] for span in spans[1:])
