# jsonrescue/sanitizers/concatenation.py
"""
Collapses code-style concatenation chains into plain string literals.

Generators describing source code sometimes emit values such as
`BASE_PATH + "/file.ts"` instead of a string. A chain of string literals and
identifiers joined by `+` in value position is reduced to:
- the merged literal, when every operand is a literal
- the most informative (longest, first on ties) literal otherwise
- `""` when the chain holds no literal at all
"""
from __future__ import annotations
import re
from typing import List, Optional, Tuple

from ..core.scanner import find_string_end
from .base import Sanitizer, SanitizerResult

IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.()]*")
KEYWORDS = frozenset({"true", "false", "null"})
VALUE_PREFIXES = frozenset(":[,")
CHAIN_TERMINATORS = frozenset(",}]\n\r")

FULL_MAX_PASSES = 80
LIGHT_MAX_PASSES = 50

Operand = Tuple[str, str]  # (kind, text) with kind "lit" or "ident"


def _skip_inline_space(text: str, i: int) -> int:
    while i < len(text) and text[i] in " \t":
        i += 1
    return i


def _skip_space(text: str, i: int) -> int:
    while i < len(text) and text[i].isspace():
        i += 1
    return i


def _parse_operand(text: str, i: int) -> Optional[Tuple[Operand, int]]:
    if i >= len(text):
        return None
    if text[i] == '"':
        end = find_string_end(text, i)
        if end is None:
            return None
        return ("lit", text[i + 1:end]), end + 1
    m = IDENT_RE.match(text, i)
    if m and m.group(0) not in KEYWORDS:
        return ("ident", m.group(0)), m.end()
    return None


def _parse_chain(text: str, i: int) -> Optional[Tuple[List[Operand], int]]:
    """Parse `operand (+ operand)+` at `i`; returns operands and end index."""
    first = _parse_operand(text, i)
    if first is None:
        return None
    operands = [first[0]]
    pos = first[1]
    while True:
        j = _skip_space(text, pos)
        if j >= len(text) or text[j] != "+":
            break
        nxt = _parse_operand(text, _skip_space(text, j + 1))
        if nxt is None:
            break
        operands.append(nxt[0])
        pos = nxt[1]
    if len(operands) < 2:
        return None
    end = _skip_inline_space(text, pos)
    if end < len(text) and text[end] not in CHAIN_TERMINATORS:
        return None
    return operands, pos


def _collapse(operands: List[Operand]) -> str:
    literals = [value for kind, value in operands if kind == "lit"]
    if not literals:
        return '""'
    if len(literals) == len(operands):
        return '"' + "".join(literals) + '"'
    best = max(literals, key=len)
    return f'"{best}"'


def _previous_significant(text: str, i: int) -> str:
    j = i - 1
    while j >= 0 and text[j].isspace():
        j -= 1
    return text[j] if j >= 0 else ""


def collapse_chains_once(text: str) -> Tuple[str, int]:
    """One left-to-right pass; returns new text and number of chains collapsed."""
    out = []
    collapsed = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        at_value = _previous_significant(text, i) in VALUE_PREFIXES
        if at_value and (ch == '"' or IDENT_RE.match(ch)):
            chain = _parse_chain(text, i)
            if chain is not None:
                operands, end = chain
                out.append(_collapse(operands))
                collapsed += 1
                i = end
                continue
        if ch == '"':
            end = find_string_end(text, i)
            if end is None:
                out.append(text[i:])
                break
            out.append(text[i:end + 1])
            i = end + 1
            continue
        if IDENT_RE.match(ch):
            m = IDENT_RE.match(text, i)
            out.append(m.group(0))
            i = m.end()
            continue
        out.append(ch)
        i += 1
    return "".join(out), collapsed


class NormalizeConcatenationChains(Sanitizer):
    """Collapse `+` chains repeatedly, up to a fixed number of passes."""

    name = "normalize_concatenation_chains"
    description = "Collapsed concatenation chains into string literals"
    max_passes = FULL_MAX_PASSES

    def apply(self, text: str) -> SanitizerResult:
        if "+" not in text:
            return self.unchanged(text)

        current = text
        total = 0
        for _ in range(self.max_passes):
            current, collapsed = collapse_chains_once(current)
            if not collapsed:
                break
            total += collapsed

        return self.result(text, current, [f"Collapsed {total} concatenation chain(s)"])


class CollapseConcatenationChains(NormalizeConcatenationChains):
    """Lighter pre-pass used before span extraction."""

    name = "collapse_concatenation_chains"
    max_passes = LIGHT_MAX_PASSES
