# jsonrescue/core/scanner.py
"""
String-literal state tracking shared by every structural sanitizer.

Walks text once, toggling string state on unescaped double quotes. Inside a
string a backslash escapes exactly the next character; a trailing backslash
at end of input has nothing to escape and is treated as a literal.
"""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional, Tuple


def iter_string_states(text: str, start: int = 0) -> Iterator[Tuple[int, str, bool]]:
    """
    Yield (index, char, in_string) for every character from `start`.

    The opening and closing quotes of a literal report in_string=True.
    `start` must lie outside any string literal.
    """
    in_str = False
    esc = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_str:
            if esc:
                esc = False
            elif ch == "\\":
                esc = True
            elif ch == '"':
                yield i, ch, True
                in_str = False
                continue
            yield i, ch, True
        else:
            if ch == '"':
                in_str = True
            yield i, ch, in_str


def is_in_string(text: str, offset: int) -> bool:
    """Report whether `offset` lies inside a string literal (quotes included)."""
    if offset < 0 or offset >= len(text):
        return False
    for i, _, in_str in iter_string_states(text):
        if i == offset:
            return in_str
    return False


def find_string_end(text: str, open_index: int) -> Optional[int]:
    """
    Return the index of the quote closing the literal opened at `open_index`.

    Returns None when the literal runs to end of input.
    """
    esc = False
    for i in range(open_index + 1, len(text)):
        ch = text[i]
        if esc:
            esc = False
        elif ch == "\\":
            esc = True
        elif ch == '"':
            return i
    return None


def split_by_strings(text: str) -> List[Tuple[str, bool]]:
    """
    Split text into (segment, is_string) runs.

    String segments include their quotes. An unterminated trailing literal
    is returned as a string segment.
    """
    segments: List[Tuple[str, bool]] = []
    i = 0
    n = len(text)
    while i < n:
        q = text.find('"', i)
        if q == -1:
            segments.append((text[i:], False))
            break
        if q > i:
            segments.append((text[i:q], False))
        end = find_string_end(text, q)
        if end is None:
            segments.append((text[q:], True))
            break
        segments.append((text[q:end + 1], True))
        i = end + 1
    return segments


def map_outside_strings(text: str, fn: Callable[[str], str]) -> str:
    """Apply `fn` to every run of text outside string literals."""
    return "".join(
        seg if is_str else fn(seg)
        for seg, is_str in split_by_strings(text)
    )
